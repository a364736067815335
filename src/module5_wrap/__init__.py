# file: module5_wrap/__init__.py
"""
Module 5: Wrap Orchestrator

Transforms every eligible file produced by a directory walk or an
external command (clone, download) using snapshot diffing and
binary/text classification.

Public API:
    - run_wrap(direction, target, password, ...) -> WrapReport
    - WrapSession(password, direction, ...).run(target)
    - encode_file / decode_file for single files
"""

from .session import WrapSession, WrapState, run_wrap
from .snapshot import Snapshot, Fingerprint, diff_snapshots, fingerprint_file
from .classify import (
    Direction,
    FileClass,
    SkipReason,
    Classification,
    ClassificationRules,
    classify,
    classify_path,
    is_binary_content,
)
from .fetch import FetchResult, run_command, writes_to_disk, git_clone_target
from .transform import encode_file, decode_file, transform_files, output_path_for
from .report import WrapReport, FileRecord, Outcome, human_size
from .errors import WrapError, CommandFailedError, FileIOError, NoFilesProducedError


__all__ = [
    'WrapSession',
    'WrapState',
    'run_wrap',
    'Snapshot',
    'Fingerprint',
    'diff_snapshots',
    'fingerprint_file',
    'Direction',
    'FileClass',
    'SkipReason',
    'Classification',
    'ClassificationRules',
    'classify',
    'classify_path',
    'is_binary_content',
    'FetchResult',
    'run_command',
    'writes_to_disk',
    'git_clone_target',
    'encode_file',
    'decode_file',
    'transform_files',
    'output_path_for',
    'WrapReport',
    'FileRecord',
    'Outcome',
    'human_size',
    'WrapError',
    'CommandFailedError',
    'FileIOError',
    'NoFilesProducedError',
]


__version__ = '1.0.0'
