# file: module2_symbol_mapping/codec.py
"""
Byte <-> symbol sequence conversion.

Each byte is split into four 2-bit codons, most-significant pair first,
and each codon is emitted as one symbol. Decoding is the exact inverse.
"""

from typing import Optional

import numpy as np

from module0_common.errors import InputFormatError

from .mapping import SymbolMapping, _INVALID

SYMBOLS_PER_BYTE = 4

# Shift amounts for codons in MSB-first order
_SHIFTS = np.array([6, 4, 2, 0], dtype=np.uint8)


def encode_bytes(data: bytes, mapping: SymbolMapping) -> str:
    """
    Convert bytes to a symbol sequence.

    Args:
        data: Arbitrary bytes
        mapping: Codon -> symbol bijection

    Returns:
        String of exactly 4 * len(data) symbols
    """
    if len(data) == 0:
        return ""

    values = np.frombuffer(bytes(data), dtype=np.uint8)
    codons = (values[:, None] >> _SHIFTS) & 0b11  # shape (N, 4)

    return mapping.encode_table()[codons].tobytes().decode('ascii')


def decode_bytes(symbols: str, mapping: SymbolMapping) -> bytes:
    """
    Convert a symbol sequence back to bytes.

    Args:
        symbols: Symbol string with no separators
        mapping: The same bijection used for encoding

    Returns:
        Decoded bytes (len(symbols) / 4 of them)

    Raises:
        InputFormatError: If the length is not a multiple of 4 or a
                          character is outside the mapping's alphabet
    """
    quads = _lookup_codons(symbols, mapping).reshape(-1, SYMBOLS_PER_BYTE)
    packed = (quads[:, 0] << 6) | (quads[:, 1] << 4) | (quads[:, 2] << 2) | quads[:, 3]

    return packed.astype(np.uint8).tobytes()


def validate_symbols(symbols: str, alphabet: str) -> None:
    """
    Check length and character set without choosing a mapping.

    Every bijection shares the same symbol set, so any one of them can
    vouch for the characters.

    Raises:
        InputFormatError: Same conditions as decode_bytes
    """
    _lookup_codons(symbols, SymbolMapping(alphabet))


def _lookup_codons(symbols: str, mapping: SymbolMapping) -> np.ndarray:
    if len(symbols) % SYMBOLS_PER_BYTE != 0:
        raise InputFormatError(
            f"Invalid symbol sequence: length {len(symbols)} is not a multiple of {SYMBOLS_PER_BYTE}"
        )

    try:
        raw = symbols.encode('ascii')
    except UnicodeEncodeError as e:
        raise InputFormatError(
            f"Invalid symbol sequence: unexpected character {symbols[e.start]!r} at position {e.start}"
        ) from e

    codons = mapping.decode_table()[np.frombuffer(raw, dtype=np.uint8)]

    invalid = np.flatnonzero(codons == _INVALID)
    if invalid.size > 0:
        position = int(invalid[0])
        raise InputFormatError(
            f"Invalid symbol sequence: unexpected character {symbols[position]!r} at position {position}"
        )

    return codons


def strip_separators(text: str, separators: str = "-") -> str:
    """Remove whitespace and grouping separator characters."""
    compact = ''.join(text.split())
    if separators:
        compact = compact.translate({ord(ch): None for ch in separators})
    return compact


def group_symbols(sequence: str, width: Optional[int]) -> str:
    """
    Split a sequence into space-separated groups of `width` symbols.

    A width of 0 or None returns the sequence unchanged.

    Raises:
        ValueError: If width is negative

    Example:
        >>> group_symbols("ATGCATGC", 4)
        'ATGC ATGC'
    """
    if width is not None and width < 0:
        raise ValueError(f"Group width must be >= 0, got {width}")
    if not width:
        return sequence
    return ' '.join(sequence[i:i + width] for i in range(0, len(sequence), width))
