# file: module5_wrap/snapshot.py
"""
Filesystem snapshot and diff.

To find what a command produced, the tree under the root is captured
before and after it runs. Each file is fingerprinted by size and a
SHA-256 content hash; modification times are not used because their
resolution varies between filesystems.
"""

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple, Union

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1 << 16


@dataclass(frozen=True)
class Fingerprint:
    size: int
    digest: str


def fingerprint_file(path: Path, algorithm: str = "sha256") -> Fingerprint:
    """Hash a file's content in chunks."""
    hasher = hashlib.new(algorithm)
    size = 0
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b''):
            hasher.update(chunk)
            size += len(chunk)
    return Fingerprint(size=size, digest=hasher.hexdigest())


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable map of relative file path -> Fingerprint under `root`.

    Symlinks are not followed and not recorded.
    """
    root: Path
    files: Mapping[Path, Fingerprint]

    @classmethod
    def empty(cls, root: Union[str, Path]) -> "Snapshot":
        return cls(root=Path(root), files=MappingProxyType({}))

    @classmethod
    def capture(cls, root: Union[str, Path], algorithm: str = "sha256") -> "Snapshot":
        """Capture every regular file under `root`."""
        root = Path(root)
        files = {}

        for dirpath, _dirnames, filenames in os.walk(root, followlinks=False):
            for name in filenames:
                path = Path(dirpath) / name
                if path.is_symlink() or not path.is_file():
                    continue
                try:
                    files[path.relative_to(root)] = fingerprint_file(path, algorithm)
                except OSError as e:
                    # Vanished or unreadable between listing and hashing
                    logger.debug("Snapshot skipped %s: %s", path, e)

        return cls(root=root, files=MappingProxyType(files))

    def __len__(self) -> int:
        return len(self.files)

    def paths(self) -> Tuple[Path, ...]:
        return tuple(sorted(self.files))


def diff_snapshots(before: Snapshot, after: Snapshot) -> Tuple[Path, ...]:
    """
    Return relative paths in `after` that are new or changed versus `before`.

    A path is new if it is absent from `before`, changed if its
    fingerprint differs. Deleted files are not reported. Sorted.
    """
    return tuple(sorted(
        path for path, fingerprint in after.files.items()
        if before.files.get(path) != fingerprint
    ))
