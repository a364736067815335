# file: module4_packet/packet_errors.py
"""
Packet framing and mapping recovery error types.
"""

from module0_common.errors import DendecError, InputFormatError


class MalformedPacketError(InputFormatError):
    """Raised when packet structure is invalid (bad magic, truncation, length mismatch)."""
    pass


class UnsupportedVersionError(InputFormatError):
    """Raised when packet version is not supported."""
    pass


class MappingRecoveryError(DendecError):
    """
    Raised when no candidate mapping yields a self-consistent header.

    Either the password is wrong or the sequence was not produced by
    dendec; the two causes cannot be told apart.
    """
    pass
