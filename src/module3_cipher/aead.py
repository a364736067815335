# file: module3_cipher/aead.py
"""
Authenticated encryption using ChaCha20-Poly1305.
"""

from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .crypto_errors import AuthenticationFailureError

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


def _check_sizes(key: bytes, nonce: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")


def seal_aead(
    plaintext: bytes,
    key: bytes,
    nonce: bytes,
    aad: Optional[bytes] = None
) -> bytes:
    """
    Encrypt and authenticate data using ChaCha20-Poly1305.

    Args:
        plaintext: Data to encrypt
        key: 32-byte encryption key
        nonce: 12-byte nonce (must be unique per key)
        aad: Additional authenticated data (not encrypted), optional

    Returns:
        ciphertext || 16-byte Poly1305 tag
    """
    _check_sizes(key, nonce)
    cipher = ChaCha20Poly1305(key)
    return cipher.encrypt(nonce, plaintext, aad)


def open_aead(
    ciphertext_with_tag: bytes,
    key: bytes,
    nonce: bytes,
    aad: Optional[bytes] = None
) -> bytes:
    """
    Verify and decrypt data sealed by seal_aead.

    The tag is checked before any plaintext is returned; on failure no
    plaintext bytes are released.

    Args:
        ciphertext_with_tag: ciphertext || tag
        key: 32-byte encryption key
        nonce: 12-byte nonce (same as encryption)
        aad: Additional authenticated data (same as encryption)

    Returns:
        Decrypted plaintext

    Raises:
        AuthenticationFailureError: If tag verification fails
    """
    _check_sizes(key, nonce)
    if len(ciphertext_with_tag) < TAG_SIZE:
        raise AuthenticationFailureError("Decryption failed: wrong password or corrupted data")

    cipher = ChaCha20Poly1305(key)
    try:
        return cipher.decrypt(nonce, ciphertext_with_tag, aad)
    except InvalidTag:
        # Wrong password, corruption and tampering are reported identically
        raise AuthenticationFailureError(
            "Decryption failed: wrong password or corrupted data"
        ) from None
