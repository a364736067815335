# file: module4_packet/__init__.py
"""
Module 4: Packet Framing & Bootstrap Recovery

Frames sealed payloads behind a fixed 41-byte header and recovers the
symbol mapping on decode from the sequence and password alone.
"""

from .pipeline import encode_raw, decode_raw, encode_text, decode_text
from .framing import (
    PacketHeader,
    build_header,
    build_packet,
    parse_header,
    parse_packet,
    HEADER_SIZE,
    HEADER_SYMBOLS,
    TAG_SIZE,
)
from .bootstrap import MappingSearch, SearchState, CandidateAttempt
from .packet_errors import (
    MalformedPacketError,
    UnsupportedVersionError,
    MappingRecoveryError,
)


__all__ = [
    'encode_raw',
    'decode_raw',
    'encode_text',
    'decode_text',
    'PacketHeader',
    'build_header',
    'build_packet',
    'parse_header',
    'parse_packet',
    'HEADER_SIZE',
    'HEADER_SYMBOLS',
    'TAG_SIZE',
    'MappingSearch',
    'SearchState',
    'CandidateAttempt',
    'MalformedPacketError',
    'UnsupportedVersionError',
    'MappingRecoveryError',
]


__version__ = '1.0.0'
