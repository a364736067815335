# file: module4_packet/bootstrap.py
"""
Bootstrap recovery of the symbol mapping.

The mapping used for an encode is never stored. It is one of the 24
bijections of the alphabet, and only the right one satisfies both:
    1. The first 164 symbols decode to a header with the right magic/version
    2. Re-deriving the mapping from (password, decoded salt) gives back
       the candidate itself

The search is a bounded state machine:
    SEARCHING(index) -> FOUND(mapping) | EXHAUSTED
Each step examines exactly one candidate, so at most 24 steps (and at
most 24 key derivations) are ever taken.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from module0_common.config import resolve_config
from module0_common.errors import InputFormatError
from module1_kdf import derive, DerivedMaterial
from module2_symbol_mapping import SymbolMapping, all_mappings, decode_bytes, derive_mapping

from .framing import (
    HEADER_SYMBOLS,
    SALT_OFFSET,
    NONCE_OFFSET,
    format_identity,
    header_matches,
)
from .packet_errors import MappingRecoveryError

logger = logging.getLogger(__name__)


class SearchState(Enum):
    SEARCHING = "searching"
    FOUND = "found"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class CandidateAttempt:
    """What happened to one candidate mapping."""
    index: int
    mapping: SymbolMapping
    header_matched: bool
    self_consistent: bool


class MappingSearch:
    """
    Search the candidate mappings for the one that produced a sequence.

    Args:
        symbols: Separator-free symbol sequence (at least 164 symbols)
        password: Password bytes or str
        config: Configuration (format.alphabet, format.magic, crypto.kdf)
        derive_fn: Key derivation function, injectable for tests
    """

    def __init__(
        self,
        symbols: str,
        password: Union[str, bytes],
        config: Optional[Dict[str, Any]] = None,
        derive_fn: Callable[..., DerivedMaterial] = derive
    ):
        self.config = resolve_config(config)

        if len(symbols) < HEADER_SYMBOLS:
            raise InputFormatError(
                f"Sequence too short: {len(symbols)} symbols (header needs {HEADER_SYMBOLS})"
            )

        self.header_symbols = symbols[:HEADER_SYMBOLS]
        self.password = password
        self.derive_fn = derive_fn
        self.alphabet = self.config['format']['alphabet']
        self.magic, self.version = format_identity(self.config)

        self.candidates = all_mappings(self.alphabet)
        self.state = SearchState.SEARCHING
        self.index = 0
        self.kdf_calls = 0
        self.attempts: List[CandidateAttempt] = []

        self.mapping: Optional[SymbolMapping] = None
        self.material: Optional[DerivedMaterial] = None

    @property
    def max_attempts(self) -> int:
        return len(self.candidates)

    def step(self) -> SearchState:
        """Examine the next candidate and return the resulting state."""
        if self.state is not SearchState.SEARCHING:
            return self.state

        candidate = self.candidates[self.index]
        header_bytes = decode_bytes(self.header_symbols, candidate)

        header_matched = header_matches(header_bytes, self.magic, self.version)
        self_consistent = False

        if header_matched:
            salt = header_bytes[SALT_OFFSET:NONCE_OFFSET]
            material = self.derive_fn(self.password, salt, self.config)
            self.kdf_calls += 1

            expected = derive_mapping(material.mapping_seed, self.alphabet)
            self_consistent = expected == candidate

            if self_consistent:
                self.mapping = candidate
                self.material = material

        self.attempts.append(CandidateAttempt(
            index=self.index,
            mapping=candidate,
            header_matched=header_matched,
            self_consistent=self_consistent,
        ))
        logger.debug(
            "Candidate %d/%d: header=%s consistent=%s",
            self.index + 1, self.max_attempts, header_matched, self_consistent
        )

        self.index += 1

        if self_consistent:
            self.state = SearchState.FOUND
        elif self.index >= self.max_attempts:
            self.state = SearchState.EXHAUSTED

        return self.state

    def run(self) -> SymbolMapping:
        """
        Step until the search terminates.

        Returns:
            The recovered mapping

        Raises:
            MappingRecoveryError: If every candidate was rejected
        """
        while self.state is SearchState.SEARCHING:
            self.step()

        if self.state is SearchState.EXHAUSTED:
            raise MappingRecoveryError(
                "No symbol mapping matched: wrong password or not a dendec sequence"
            )

        logger.debug(
            "Mapping recovered at candidate %d after %d key derivation(s)",
            self.index, self.kdf_calls
        )
        return self.mapping
