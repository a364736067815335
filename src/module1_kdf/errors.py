# file: module1_kdf/errors.py
"""
Key derivation error types.
"""

from module0_common.errors import DendecError


class KeyDerivationError(DendecError):
    """Raised when the password hash cannot be computed."""
    pass
