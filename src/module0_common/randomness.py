# file: module0_common/randomness.py
"""
Randomness sources for salts and nonces.

Production code draws from the operating system CSPRNG. Tests may
substitute a seeded source so that encodes become reproducible.
"""

import os
from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    """Anything that can produce n random bytes."""

    def token_bytes(self, n: int) -> bytes:
        ...


class SystemRandomSource:
    """OS-seeded cryptographic randomness (os.urandom)."""

    def token_bytes(self, n: int) -> bytes:
        return os.urandom(n)


class SeededRandomSource:
    """
    Deterministic randomness for tests.

    NOT suitable for real encodes: every instance built from the same
    seed yields the same salt and nonce sequence.
    """

    def __init__(self, seed: int):
        self._rng = np.random.default_rng(seed)

    def token_bytes(self, n: int) -> bytes:
        return self._rng.bytes(n)


DEFAULT_RANDOM_SOURCE = SystemRandomSource()
