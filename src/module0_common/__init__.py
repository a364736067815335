# file: module0_common/__init__.py
"""
Module 0: Common Infrastructure

Configuration, the base error hierarchy and randomness sources used by
every other stage of the dendec pipeline.
"""

from .config import (
    DEFAULT_CONFIG,
    load_config,
    merge_config,
    resolve_config,
    validate_config,
)
from .errors import DendecError, ConfigurationError, InputFormatError
from .randomness import (
    RandomSource,
    SystemRandomSource,
    SeededRandomSource,
    DEFAULT_RANDOM_SOURCE,
)


__all__ = [
    'DEFAULT_CONFIG',
    'load_config',
    'merge_config',
    'resolve_config',
    'validate_config',
    'DendecError',
    'ConfigurationError',
    'InputFormatError',
    'RandomSource',
    'SystemRandomSource',
    'SeededRandomSource',
    'DEFAULT_RANDOM_SOURCE',
]


__version__ = '1.0.0'
