# file: module1_kdf/kdf.py
"""
Key derivation using Argon2id.

One Argon2id call yields both the cipher key and the seed that decides
the output alphabet mapping. Both are fully determined by (password, salt).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

from module0_common.config import resolve_config

from .errors import KeyDerivationError

logger = logging.getLogger(__name__)

SALT_SIZE = 16
KEY_SIZE = 32          # 256-bit ChaCha20 key
MAPPING_SEED_SIZE = 8  # 64-bit seed for the mapping shuffle


@dataclass(frozen=True)
class DerivedMaterial:
    """Key material derived from one (password, salt) pair. Never persisted."""
    cipher_key: bytes = field(repr=False)
    mapping_seed: int = field(repr=False)
    salt: bytes


def password_bytes(password: Union[str, bytes], config: Optional[Dict[str, Any]] = None) -> bytes:
    """
    Normalize a password to bytes and enforce the minimum length.

    Raises:
        ValueError: If the password is shorter than the configured minimum
    """
    config = resolve_config(config)
    if isinstance(password, str):
        password = password.encode('utf-8')

    min_length = config['crypto']['security']['min_password_length']
    if len(password) < min_length:
        raise ValueError(f"Password must be at least {min_length} byte(s)")

    return password


def derive(
    password: Union[str, bytes],
    salt: bytes,
    config: Optional[Dict[str, Any]] = None
) -> DerivedMaterial:
    """
    Derive cipher key and mapping seed from a password using Argon2id.

    Args:
        password: User passphrase (str is encoded as UTF-8)
        salt: 16-byte salt, random per encode or read from a header
        config: Configuration with crypto.kdf parameters

    Returns:
        DerivedMaterial with a 32-byte key and a 64-bit mapping seed
        (output bytes 32..39, little-endian)

    Raises:
        ValueError: If the password is empty or the salt has the wrong size
        KeyDerivationError: If Argon2 rejects the parameters
    """
    config = resolve_config(config)
    secret = password_bytes(password, config)

    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")

    kdf_config = config['crypto']['kdf']
    logger.debug(
        "Argon2id: time_cost=%d memory_cost=%d KiB parallelism=%d",
        kdf_config['time_cost'], kdf_config['memory_cost'], kdf_config['parallelism']
    )

    try:
        output = hash_secret_raw(
            secret=secret,
            salt=salt,
            time_cost=kdf_config['time_cost'],
            memory_cost=kdf_config['memory_cost'],
            parallelism=kdf_config['parallelism'],
            hash_len=kdf_config['hash_len'],
            type=Type.ID  # Argon2id
        )
    except HashingError as e:
        raise KeyDerivationError(f"Argon2id key derivation failed: {e}") from e

    cipher_key = output[:KEY_SIZE]
    mapping_seed = int.from_bytes(output[KEY_SIZE:KEY_SIZE + MAPPING_SEED_SIZE], 'little')

    return DerivedMaterial(cipher_key=cipher_key, mapping_seed=mapping_seed, salt=bytes(salt))
