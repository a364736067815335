# file: module1_kdf/__init__.py
"""
Module 1: Key Derivation

Turns a password and a salt into a cipher key and a mapping seed.
"""

from .kdf import (
    derive,
    password_bytes,
    DerivedMaterial,
    SALT_SIZE,
    KEY_SIZE,
    MAPPING_SEED_SIZE,
)
from .errors import KeyDerivationError


__all__ = [
    'derive',
    'password_bytes',
    'DerivedMaterial',
    'SALT_SIZE',
    'KEY_SIZE',
    'MAPPING_SEED_SIZE',
    'KeyDerivationError',
]


__version__ = '1.0.0'
