# file: module2_symbol_mapping/mapping.py
"""
Symbol mapping: a bijection between 2-bit codon values and the 4 symbols
of the output alphabet.

The mapping for an encode is derived from the password-dependent mapping
seed, so the alphabet assignment itself is key-dependent.
"""

import itertools
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Tuple

import numpy as np

DEFAULT_ALPHABET = "ATGC"
CODON_VALUES = 4

# Marks bytes that are not a symbol of the mapping
_INVALID = 0xFF


@dataclass(frozen=True)
class SymbolMapping:
    """
    Bijection codon -> symbol.

    `symbols[c]` is the symbol emitted for codon value c (0b00..0b11).
    Two mappings are equal iff they assign the same symbol to every codon.
    """
    symbols: str

    def __post_init__(self):
        if len(self.symbols) != CODON_VALUES or len(set(self.symbols)) != CODON_VALUES:
            raise ValueError(f"Mapping needs 4 distinct symbols, got {self.symbols!r}")

    def symbol_for(self, codon: int) -> str:
        return self.symbols[codon]

    def codon_for(self, symbol: str) -> int:
        return self.symbols.index(symbol)

    def encode_table(self) -> np.ndarray:
        """Lookup array indexed by codon value, holding ASCII symbol codes."""
        return _encode_table(self.symbols)

    def decode_table(self) -> np.ndarray:
        """256-entry lookup from ASCII code to codon value (0xFF = not a symbol)."""
        return _decode_table(self.symbols)


@lru_cache(maxsize=64)
def _encode_table(symbols: str) -> np.ndarray:
    table = np.frombuffer(symbols.encode('ascii'), dtype=np.uint8).copy()
    table.setflags(write=False)
    return table


@lru_cache(maxsize=64)
def _decode_table(symbols: str) -> np.ndarray:
    table = np.full(256, _INVALID, dtype=np.uint8)
    for codon, symbol in enumerate(symbols.encode('ascii')):
        table[symbol] = codon
    table.setflags(write=False)
    return table


def derive_mapping(
    mapping_seed: int,
    alphabet: str = DEFAULT_ALPHABET,
    rng_factory: Callable[[int], np.random.Generator] = np.random.default_rng
) -> SymbolMapping:
    """
    Derive the symbol mapping from a mapping seed.

    Fisher-Yates shuffle of the ordered alphabet driven by a generator
    seeded with `mapping_seed`. Same seed -> same mapping.

    Args:
        mapping_seed: 64-bit seed from key derivation
        alphabet: The 4 output symbols in their canonical order
        rng_factory: Builds a numpy Generator from a seed

    Returns:
        SymbolMapping
    """
    rng = rng_factory(mapping_seed)
    symbols = list(alphabet)

    for i in range(len(symbols) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        symbols[i], symbols[j] = symbols[j], symbols[i]

    return SymbolMapping(''.join(symbols))


def all_mappings(alphabet: str = DEFAULT_ALPHABET) -> Tuple[SymbolMapping, ...]:
    """
    Enumerate every bijection of the alphabet (24 for 4 symbols).

    Order is fixed: lexicographic by position in `alphabet`, so the
    canonical alphabet order itself comes first.
    """
    return tuple(SymbolMapping(''.join(p)) for p in itertools.permutations(alphabet))
