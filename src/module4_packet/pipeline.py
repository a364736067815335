# file: module4_packet/pipeline.py
"""
Encode and decode pipelines.

    encode: KDF -> mapping -> seal -> frame -> symbols
    decode: strip -> bootstrap search -> parse -> open -> bytes
"""

import logging
from typing import Any, Dict, Optional, Union

from module0_common.config import resolve_config
from module0_common.errors import InputFormatError
from module0_common.randomness import DEFAULT_RANDOM_SOURCE, RandomSource
from module1_kdf import derive, password_bytes
from module2_symbol_mapping import (
    decode_bytes,
    derive_mapping,
    encode_bytes,
    group_symbols,
    strip_separators,
    validate_symbols,
)
from module3_cipher import open_aead, seal_aead

from .bootstrap import MappingSearch
from .framing import (
    HEADER_SYMBOLS,
    NONCE_SIZE,
    SALT_SIZE,
    build_header,
    build_packet,
    parse_packet,
)

logger = logging.getLogger(__name__)


def encode_raw(
    plaintext: bytes,
    password: Union[str, bytes],
    group: Optional[int] = None,
    config: Optional[Dict[str, Any]] = None,
    random_source: Optional[RandomSource] = None
) -> str:
    """
    Encrypt bytes into a symbol sequence.

    A fresh salt and nonce are drawn for every call, so encoding the same
    input twice yields different sequences.

    Args:
        plaintext: Any bytes (empty allowed)
        password: User passphrase
        group: Output group width (None: use format.group from config)
        config: Configuration dictionary
        random_source: Source of salt/nonce bytes (OS CSPRNG by default)

    Returns:
        Symbol sequence, optionally space-grouped

    Raises:
        ValueError: If the password is empty
    """
    config = resolve_config(config)
    random_source = random_source or DEFAULT_RANDOM_SOURCE
    secret = password_bytes(password, config)
    plaintext = bytes(plaintext)

    salt = random_source.token_bytes(SALT_SIZE)
    nonce = random_source.token_bytes(NONCE_SIZE)

    material = derive(secret, salt, config)
    header = build_header(salt, nonce, len(plaintext), config)

    aad = header.to_bytes() if config['crypto']['security']['bind_header'] else None
    sealed = seal_aead(plaintext, material.cipher_key, nonce, aad)
    packet = build_packet(header, sealed)

    mapping = derive_mapping(material.mapping_seed, config['format']['alphabet'])
    sequence = encode_bytes(packet, mapping)

    logger.debug("Encoded %d bytes into %d symbols", len(plaintext), len(sequence))

    if group is None:
        group = config['format'].get('group')
    return group_symbols(sequence, group)


def decode_raw(
    sequence: Union[str, bytes],
    password: Union[str, bytes],
    config: Optional[Dict[str, Any]] = None
) -> bytes:
    """
    Decrypt a symbol sequence produced by encode_raw.

    Args:
        sequence: Symbol sequence, whitespace/separators allowed
        password: User passphrase (must match encoding password)
        config: Configuration (must match encoding format and KDF parameters)

    Returns:
        The original bytes

    Raises:
        InputFormatError: Bad length or characters (MalformedPacketError
                          if the decoded packet is inconsistent)
        MappingRecoveryError: No candidate mapping was self-consistent
        AuthenticationFailureError: Tag verification failed
    """
    config = resolve_config(config)
    secret = password_bytes(password, config)

    if isinstance(sequence, (bytes, bytearray)):
        try:
            sequence = bytes(sequence).decode('ascii')
        except UnicodeDecodeError as e:
            raise InputFormatError(
                f"Invalid symbol sequence: non-ASCII byte at position {e.start}"
            ) from e

    symbols = strip_separators(sequence, config['format'].get('separators') or "")

    if len(symbols) < HEADER_SYMBOLS:
        raise InputFormatError(
            f"Sequence too short: {len(symbols)} symbols (header needs {HEADER_SYMBOLS})"
        )
    validate_symbols(symbols, config['format']['alphabet'])

    search = MappingSearch(symbols, secret, config)
    mapping = search.run()

    packet = decode_bytes(symbols, mapping)
    header, sealed = parse_packet(packet, config)

    aad = header.to_bytes() if config['crypto']['security']['bind_header'] else None
    # Same salt as the accepted candidate, so its key material is reused
    return open_aead(sealed, search.material.cipher_key, header.nonce, aad)


def encode_text(
    text: str,
    password: Union[str, bytes],
    group: Optional[int] = None,
    config: Optional[Dict[str, Any]] = None,
    random_source: Optional[RandomSource] = None
) -> str:
    """Encode Unicode text (as UTF-8) into a symbol sequence."""
    return encode_raw(text.encode('utf-8'), password, group, config, random_source)


def decode_text(
    sequence: Union[str, bytes],
    password: Union[str, bytes],
    config: Optional[Dict[str, Any]] = None
) -> str:
    """
    Decode a symbol sequence to Unicode text.

    Raises:
        UnicodeDecodeError: If the plaintext is not valid UTF-8
    """
    return decode_raw(sequence, password, config).decode('utf-8')
