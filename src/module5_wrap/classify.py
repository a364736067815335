# file: module5_wrap/classify.py
"""
File classification for wrap.

Decides whether a produced file is encoded, decoded or skipped. All
rules come from one static table (ClassificationRules), and every
function here is pure: paths and bytes in, a decision out.

Binary detection:
    - extension in the binary denylist, or
    - any zero byte in the content, or
    - more than `binary_threshold` of the first `sample_size` bytes
      are non-printable control characters
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, FrozenSet, Optional

import numpy as np

from module0_common.config import resolve_config


class Direction(Enum):
    ENCODE = "encode"
    DECODE = "decode"


class FileClass(Enum):
    ENCODE = "encode"
    DECODE = "decode"
    SKIP = "skip"


class SkipReason(Enum):
    BINARY = "binary"
    ALREADY_ENCODED = "already encoded"
    NOT_ENCODED = "not encoded"
    EXCLUDED_DIR = "excluded dir"


@dataclass(frozen=True)
class Classification:
    file_class: FileClass
    reason: Optional[SkipReason] = None

    @property
    def is_skip(self) -> bool:
        return self.file_class is FileClass.SKIP


@dataclass(frozen=True)
class ClassificationRules:
    suffix: str
    binary_extensions: FrozenSet[str]
    excluded_dirs: FrozenSet[str]
    sample_size: int
    binary_threshold: float

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "ClassificationRules":
        wrap = resolve_config(config)['wrap']
        return cls(
            suffix=wrap['suffix'],
            binary_extensions=frozenset(ext.lower().lstrip('.') for ext in wrap['binary_extensions']),
            excluded_dirs=frozenset(wrap['excluded_dirs']),
            sample_size=wrap['sample_size'],
            binary_threshold=wrap['binary_threshold'],
        )


# Control bytes that never appear in text: below BS, and SO..US except ESC
_NON_TEXT = np.zeros(256, dtype=bool)
_NON_TEXT[:0x08] = True
_NON_TEXT[0x0E:0x20] = True
_NON_TEXT[0x1B] = False


def is_excluded(rel_path: PurePath, rules: ClassificationRules) -> bool:
    """True if any directory component of the path is an excluded name."""
    return any(part in rules.excluded_dirs for part in rel_path.parts[:-1])


def has_suffix(rel_path: PurePath, rules: ClassificationRules) -> bool:
    return rel_path.name.lower().endswith(rules.suffix.lower())


def has_binary_extension(rel_path: PurePath, rules: ClassificationRules) -> bool:
    return rel_path.suffix.lower().lstrip('.') in rules.binary_extensions


def is_binary_content(content: bytes, rules: ClassificationRules) -> bool:
    """
    Content test for binary data.

    An empty file is text.
    """
    if len(content) == 0:
        return False

    if b'\x00' in content:
        return True

    sample = np.frombuffer(content[:rules.sample_size], dtype=np.uint8)
    non_text = int(np.count_nonzero(_NON_TEXT[sample]))

    return non_text > rules.binary_threshold * len(sample)


def classify_path(
    rel_path: PurePath,
    direction: Direction,
    rules: ClassificationRules
) -> Classification:
    """
    Classify from the path alone.

    In encode direction an ENCODE result is provisional: the content
    check (is_binary_content) still has to pass.
    """
    if is_excluded(rel_path, rules):
        return Classification(FileClass.SKIP, SkipReason.EXCLUDED_DIR)

    if direction is Direction.DECODE:
        if has_suffix(rel_path, rules):
            return Classification(FileClass.DECODE)
        return Classification(FileClass.SKIP, SkipReason.NOT_ENCODED)

    if has_suffix(rel_path, rules):
        return Classification(FileClass.SKIP, SkipReason.ALREADY_ENCODED)
    if has_binary_extension(rel_path, rules):
        return Classification(FileClass.SKIP, SkipReason.BINARY)
    return Classification(FileClass.ENCODE)


def classify(
    rel_path: PurePath,
    direction: Direction,
    content: Optional[bytes] = None,
    rules: Optional[ClassificationRules] = None
) -> Classification:
    """
    Full classification of one file.

    Args:
        rel_path: Path relative to the wrap root
        direction: Encode or decode
        content: File bytes; required for a final answer in encode direction
        rules: Classification table (defaults from config)

    Returns:
        Classification
    """
    rules = rules or ClassificationRules.from_config()
    result = classify_path(rel_path, direction, rules)

    if result.file_class is FileClass.ENCODE and content is not None:
        if is_binary_content(content, rules):
            return Classification(FileClass.SKIP, SkipReason.BINARY)

    return result
