# file: module0_common/errors.py
"""
Base exception types shared by every dendec module.
"""


class DendecError(Exception):
    """Base exception for all dendec operations."""
    pass


class ConfigurationError(DendecError):
    """Raised when configuration is missing, unreadable or invalid."""
    pass


class InputFormatError(DendecError):
    """
    Raised when a symbol sequence or packet is structurally invalid.

    This includes:
    - Symbol count not a multiple of 4
    - Fewer symbols than a full header needs
    - Characters outside the output alphabet
    """
    pass
