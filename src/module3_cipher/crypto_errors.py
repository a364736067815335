# file: module3_cipher/crypto_errors.py
"""
Cryptographic error types for Module 3.
"""

from module0_common.errors import DendecError


class AuthenticationFailureError(DendecError):
    """Raised when authentication tag verification fails."""
    pass
