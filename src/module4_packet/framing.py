# file: module4_packet/framing.py
"""
Packet assembly and parsing.

Packet structure (41 + N + 16 bytes):
    offset  len  field
    0       4    magic ("DNDC")
    4       1    version (0x01)
    5       16   Argon2id salt
    21      12   ChaCha20 nonce
    33      8    payload length (u64 little-endian, plaintext bytes)
    41      N+16 ciphertext || Poly1305 tag
"""

import struct
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from module0_common.config import resolve_config

from .packet_errors import MalformedPacketError, UnsupportedVersionError

MAGIC_SIZE = 4
SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
HEADER_SIZE = 41
HEADER_SYMBOLS = HEADER_SIZE * 4

SALT_OFFSET = 5
NONCE_OFFSET = 21
LENGTH_OFFSET = 33

_LENGTH = struct.Struct('<Q')


@dataclass(frozen=True)
class PacketHeader:
    magic: bytes
    version: int
    salt: bytes
    nonce: bytes
    payload_length: int

    def to_bytes(self) -> bytes:
        return (
            self.magic +
            bytes([self.version]) +
            self.salt +
            self.nonce +
            _LENGTH.pack(self.payload_length)
        )


def format_identity(config: Optional[Dict[str, Any]] = None) -> Tuple[bytes, int]:
    """Return the (magic, version) pair this configuration writes and accepts."""
    config = resolve_config(config)
    return config['format']['magic'].encode('ascii'), config['format']['version']


def build_header(
    salt: bytes,
    nonce: bytes,
    payload_length: int,
    config: Optional[Dict[str, Any]] = None
) -> PacketHeader:
    """Build the header for a payload of `payload_length` plaintext bytes."""
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")

    magic, version = format_identity(config)
    return PacketHeader(
        magic=magic,
        version=version,
        salt=bytes(salt),
        nonce=bytes(nonce),
        payload_length=payload_length,
    )


def build_packet(header: PacketHeader, ciphertext_with_tag: bytes) -> bytes:
    """
    Assemble header and sealed payload into one packet.

    Raises:
        ValueError: If the sealed payload length disagrees with the header
    """
    expected = header.payload_length + TAG_SIZE
    if len(ciphertext_with_tag) != expected:
        raise ValueError(
            f"Sealed payload is {len(ciphertext_with_tag)} bytes, header expects {expected}"
        )
    return header.to_bytes() + ciphertext_with_tag


def header_matches(header_bytes: bytes, magic: bytes, version: int) -> bool:
    """Cheap magic/version check used while searching for the mapping."""
    return (
        len(header_bytes) >= SALT_OFFSET and
        header_bytes[:MAGIC_SIZE] == magic and
        header_bytes[MAGIC_SIZE] == version
    )


def parse_header(header_bytes: bytes, config: Optional[Dict[str, Any]] = None) -> PacketHeader:
    """
    Parse the fixed 41-byte header.

    Raises:
        MalformedPacketError: If too short or the magic is wrong
        UnsupportedVersionError: If the version is not the configured one
    """
    if len(header_bytes) < HEADER_SIZE:
        raise MalformedPacketError(
            f"Packet too short: {len(header_bytes)} bytes (header needs {HEADER_SIZE})"
        )

    magic, version = format_identity(config)

    if header_bytes[:MAGIC_SIZE] != magic:
        raise MalformedPacketError("Missing or corrupted header: magic bytes not found")

    got_version = header_bytes[MAGIC_SIZE]
    if got_version != version:
        raise UnsupportedVersionError(
            f"Unsupported version: expected {version}, got {got_version}"
        )

    salt = bytes(header_bytes[SALT_OFFSET:NONCE_OFFSET])
    nonce = bytes(header_bytes[NONCE_OFFSET:LENGTH_OFFSET])
    payload_length = _LENGTH.unpack_from(header_bytes, LENGTH_OFFSET)[0]

    return PacketHeader(
        magic=magic,
        version=got_version,
        salt=salt,
        nonce=nonce,
        payload_length=payload_length,
    )


def parse_packet(
    packet: bytes,
    config: Optional[Dict[str, Any]] = None
) -> Tuple[PacketHeader, bytes]:
    """
    Split a packet into its header and sealed payload.

    Returns:
        Tuple of (header, ciphertext_with_tag)

    Raises:
        MalformedPacketError: If the structure or lengths are inconsistent
        UnsupportedVersionError: If the version is not supported
    """
    if len(packet) < HEADER_SIZE + TAG_SIZE:
        raise MalformedPacketError(
            f"Packet too short: {len(packet)} bytes (minimum {HEADER_SIZE + TAG_SIZE})"
        )

    header = parse_header(packet[:HEADER_SIZE], config)
    sealed = packet[HEADER_SIZE:]

    expected = header.payload_length + TAG_SIZE
    if len(sealed) != expected:
        raise MalformedPacketError(
            f"Payload length mismatch: header says {expected} sealed bytes, actual {len(sealed)}"
        )

    return header, sealed
