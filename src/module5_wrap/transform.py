# file: module5_wrap/transform.py
"""
Per-file encode/decode.

encode: <name>       -> <name>.dna, source removed
decode: <name>.dna   -> <name>,     source removed

The output is written to a temporary sibling and moved into place, so a
failed transform never leaves a partial file behind. An existing output
file is never overwritten.
"""

import logging
import os
import tempfile
from pathlib import Path, PurePath
from typing import Any, Dict, Iterable, Optional, Union

from module0_common.config import resolve_config
from module0_common.errors import DendecError
from module0_common.randomness import RandomSource
from module4_packet import decode_raw, encode_raw

from .classify import ClassificationRules, Direction, FileClass, classify, classify_path
from .errors import FileIOError
from .report import FileRecord, Outcome, WrapReport, human_size

logger = logging.getLogger(__name__)


def output_path_for(path: Path, direction: Direction, suffix: str = ".dna") -> Path:
    """Target path for a transform: suffix appended (encode) or stripped (decode)."""
    if direction is Direction.ENCODE:
        return path.with_name(path.name + suffix)

    if not path.name.lower().endswith(suffix.lower()) or len(path.name) == len(suffix):
        raise FileIOError(f"Not an encoded file name: {path.name}", path=path)
    return path.with_name(path.name[:-len(suffix)])


def _write_atomic(target: Path, data: bytes) -> None:
    if target.exists():
        raise FileIOError(f"Output already exists: {target}", path=target)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(tmp_name, target)
    except OSError:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def _remove_source(path: Path) -> None:
    try:
        path.unlink()
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


def encode_file(
    path: Union[str, Path],
    password: Union[str, bytes],
    config: Optional[Dict[str, Any]] = None,
    random_source: Optional[RandomSource] = None,
    content: Optional[bytes] = None
) -> Path:
    """
    Encode one file in place.

    Args:
        path: File to encode
        password: User passphrase
        config: Configuration dictionary
        random_source: Salt/nonce source
        content: Already-read file bytes (read from `path` if None)

    Returns:
        Path of the written .dna file

    Raises:
        FileIOError: Read/write failure or output already exists
    """
    config = resolve_config(config)
    path = Path(path)
    target = output_path_for(path, Direction.ENCODE, config['wrap']['suffix'])

    try:
        if content is None:
            content = path.read_bytes()
        sequence = encode_raw(content, password, config=config, random_source=random_source)
        _write_atomic(target, sequence.encode('ascii'))
    except OSError as e:
        raise FileIOError(f"{path}: {e.strerror or e}", path=path) from e

    _remove_source(path)
    return target


def decode_file(
    path: Union[str, Path],
    password: Union[str, bytes],
    config: Optional[Dict[str, Any]] = None
) -> Path:
    """
    Decode one .dna file in place.

    Returns:
        Path of the restored file

    Raises:
        FileIOError: Read/write failure or output already exists
        DendecError: Any decode failure (source is left untouched)
    """
    config = resolve_config(config)
    path = Path(path)
    target = output_path_for(path, Direction.DECODE, config['wrap']['suffix'])

    try:
        plaintext = decode_raw(path.read_bytes(), password, config=config)
        _write_atomic(target, plaintext)
    except OSError as e:
        raise FileIOError(f"{path}: {e.strerror or e}", path=path) from e

    _remove_source(path)
    return target


def transform_files(
    root: Union[str, Path],
    rel_paths: Iterable[PurePath],
    direction: Direction,
    password: Union[str, bytes],
    config: Optional[Dict[str, Any]] = None,
    random_source: Optional[RandomSource] = None,
    report: Optional[WrapReport] = None
) -> WrapReport:
    """
    Classify and transform every path under `root`.

    A failure on one file is recorded and the batch continues.
    """
    config = resolve_config(config)
    root = Path(root)
    rules = ClassificationRules.from_config(config)
    report = report if report is not None else WrapReport(direction=direction)

    for rel_path in rel_paths:
        path = root / rel_path
        try:
            original_size = path.stat().st_size
            content = None
            # Content is only read for files the path rules have not already skipped
            decision = classify_path(rel_path, direction, rules)
            if decision.file_class is FileClass.ENCODE:
                content = path.read_bytes()
                decision = classify(rel_path, direction, content=content, rules=rules)

            if decision.is_skip:
                logger.info("Skipping %s (%s)", rel_path, decision.reason.value)
                report.add(FileRecord(rel_path, Outcome.SKIPPED, original_size, original_size,
                                      reason=decision.reason))
                continue

            if decision.file_class is FileClass.ENCODE:
                target = encode_file(path, password, config, random_source, content=content)
            else:
                target = decode_file(path, password, config)
            output_size = target.stat().st_size

        except OSError as e:
            logger.warning("Failed %s: %s", rel_path, e)
            report.add(FileRecord(rel_path, Outcome.FAILED, error=f"{e.strerror or e}"))
            continue
        except DendecError as e:
            logger.warning("Failed %s: %s", rel_path, e)
            report.add(FileRecord(rel_path, Outcome.FAILED, error=str(e)))
            continue

        logger.info("%sd %s (%s -> %s)", direction.value.capitalize(), rel_path,
                    human_size(original_size), human_size(output_size))
        report.add(FileRecord(rel_path, Outcome.TRANSFORMED, original_size, output_size))

    return report
