# file: module2_symbol_mapping/__init__.py
"""
Module 2: Symbol Mapping

Derives the codon -> symbol bijection from a mapping seed and converts
between bytes and symbol sequences.

Public API:
    - derive_mapping(mapping_seed, alphabet) -> SymbolMapping
    - all_mappings(alphabet) -> tuple of the 24 bijections
    - encode_bytes(data, mapping) -> str
    - decode_bytes(symbols, mapping) -> bytes
"""

from .mapping import SymbolMapping, derive_mapping, all_mappings, DEFAULT_ALPHABET
from .codec import (
    encode_bytes,
    decode_bytes,
    validate_symbols,
    strip_separators,
    group_symbols,
    SYMBOLS_PER_BYTE,
)


__all__ = [
    'SymbolMapping',
    'derive_mapping',
    'all_mappings',
    'DEFAULT_ALPHABET',
    'encode_bytes',
    'decode_bytes',
    'validate_symbols',
    'strip_separators',
    'group_symbols',
    'SYMBOLS_PER_BYTE',
]


__version__ = '1.0.0'
