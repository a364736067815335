# file: module6_cli/__init__.py
"""
Module 6: Command-Line Interface

The `dendec` command: encode, decode and wrap.
"""

from .cli import main, build_parser, prompt_password, UsageError


__all__ = [
    'main',
    'build_parser',
    'prompt_password',
    'UsageError',
]


__version__ = '1.0.0'
