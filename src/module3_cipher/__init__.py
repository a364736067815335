# file: module3_cipher/__init__.py
"""
Module 3: Authenticated Cipher

ChaCha20-Poly1305 sealing and opening of packet payloads.
"""

from .aead import seal_aead, open_aead, KEY_SIZE, NONCE_SIZE, TAG_SIZE
from .crypto_errors import AuthenticationFailureError


__all__ = [
    'seal_aead',
    'open_aead',
    'KEY_SIZE',
    'NONCE_SIZE',
    'TAG_SIZE',
    'AuthenticationFailureError',
]


__version__ = '1.0.0'
