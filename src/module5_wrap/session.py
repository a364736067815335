# file: module5_wrap/session.py
"""
Wrap session: one invocation of `dendec wrap`.

State machine:
    IDLE -> SNAPSHOTTING -> EXECUTING -> DIFFING -> TRANSFORMING -> REPORTING -> DONE

A directory target skips EXECUTING (every file under it is produced).
A stream target (curl to stdout) goes from EXECUTING straight to
TRANSFORMING. FAILED is terminal and reached when the command fails or
produced nothing.
"""

import logging
from enum import Enum
from pathlib import Path, PurePath
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from module0_common.config import resolve_config
from module0_common.errors import DendecError
from module0_common.randomness import RandomSource
from module1_kdf import password_bytes
from module4_packet import decode_raw, encode_raw

from .classify import Direction
from .errors import CommandFailedError, NoFilesProducedError, WrapError
from .fetch import git_clone_target, run_command, writes_to_disk
from .report import FileRecord, Outcome, WrapReport
from .snapshot import Snapshot, diff_snapshots
from .transform import transform_files

logger = logging.getLogger(__name__)

STREAM_RECORD = PurePath('<stdout>')


class WrapState(Enum):
    IDLE = "idle"
    SNAPSHOTTING = "snapshotting"
    EXECUTING = "executing"
    DIFFING = "diffing"
    TRANSFORMING = "transforming"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS = {
    WrapState.IDLE: {WrapState.SNAPSHOTTING},
    WrapState.SNAPSHOTTING: {WrapState.EXECUTING, WrapState.DIFFING},
    WrapState.EXECUTING: {WrapState.DIFFING, WrapState.TRANSFORMING, WrapState.FAILED},
    WrapState.DIFFING: {WrapState.TRANSFORMING, WrapState.FAILED},
    WrapState.TRANSFORMING: {WrapState.REPORTING},
    WrapState.REPORTING: {WrapState.DONE},
    WrapState.DONE: set(),
    WrapState.FAILED: set(),
}


class WrapSession:
    """
    Drives one wrap invocation.

    Args:
        root: Working directory for commands (default: current directory)
        password: User passphrase
        direction: Encode or decode
        config: Configuration dictionary
        random_source: Salt/nonce source for encoding
    """

    def __init__(
        self,
        password: Union[str, bytes],
        direction: Direction,
        root: Optional[Union[str, Path]] = None,
        config: Optional[Dict[str, Any]] = None,
        random_source: Optional[RandomSource] = None
    ):
        self.root = Path(root) if root is not None else Path.cwd()
        self.password = password
        self.direction = direction
        self.config = resolve_config(config)
        # Rejects an unusable password before anything on disk is touched
        password_bytes(password, self.config)
        self.random_source = random_source

        self.state = WrapState.IDLE
        self.history: List[WrapState] = [WrapState.IDLE]
        self.report = WrapReport(direction=direction)

    def _advance(self, new_state: WrapState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise WrapError(f"Invalid wrap transition: {self.state.value} -> {new_state.value}")
        logger.debug("Wrap state %s -> %s", self.state.value, new_state.value)
        self.state = new_state
        self.history.append(new_state)

    def _resolve_directory(self, target: Sequence[str]) -> Optional[Path]:
        if len(target) != 1:
            return None
        candidate = Path(target[0])
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return candidate if candidate.is_dir() else None

    def run(self, target: Sequence[str]) -> WrapReport:
        """
        Run the wrap over a directory or a command.

        Args:
            target: A single existing directory path, or a command argv

        Returns:
            WrapReport

        Raises:
            CommandFailedError: Command failed; nothing was transformed
            NoFilesProducedError: Nothing to transform
        """
        if self.state is not WrapState.IDLE:
            raise WrapError("A wrap session can only be run once")

        target = list(target)
        directory = self._resolve_directory(target)

        if directory is not None:
            return self._run_directory(directory)
        return self._run_command(target)

    def _run_directory(self, directory: Path) -> WrapReport:
        logger.info("Scanning %s", directory)
        self._advance(WrapState.SNAPSHOTTING)
        algorithm = self.config['wrap']['fingerprint']
        before = Snapshot.empty(directory)
        after = Snapshot.capture(directory, algorithm)

        self._advance(WrapState.DIFFING)
        produced = diff_snapshots(before, after)
        return self._transform(directory, produced)

    def _run_command(self, argv: List[str]) -> WrapReport:
        algorithm = self.config['wrap']['fingerprint']
        capture = not writes_to_disk(argv)

        self._advance(WrapState.SNAPSHOTTING)
        before = Snapshot.empty(self.root) if capture else Snapshot.capture(self.root, algorithm)

        self._advance(WrapState.EXECUTING)
        try:
            result = run_command(argv, self.root, capture_stdout=capture)
        except CommandFailedError:
            self._advance(WrapState.FAILED)
            raise

        if capture:
            return self._transform_stream(result.stdout_bytes or b'')

        self._advance(WrapState.DIFFING)
        after = Snapshot.capture(self.root, algorithm)
        produced = diff_snapshots(before, after)

        clone_dir = git_clone_target(argv)
        if clone_dir is not None:
            prefix = self._relative_prefix(clone_dir)
            if prefix is not None:
                produced = tuple(p for p in produced if p.parts[:len(prefix.parts)] == prefix.parts)

        return self._transform(self.root, produced)

    def _relative_prefix(self, clone_dir: PurePath) -> Optional[PurePath]:
        if not clone_dir.is_absolute():
            return clone_dir
        try:
            return Path(clone_dir).relative_to(self.root)
        except ValueError:
            return None

    def _transform(self, root: Path, produced: Tuple[PurePath, ...]) -> WrapReport:
        if not produced:
            self._advance(WrapState.FAILED)
            raise NoFilesProducedError("No files found to process")

        self._advance(WrapState.TRANSFORMING)
        logger.info("%s %d file(s)", 'Encoding' if self.direction is Direction.ENCODE else 'Decoding',
                    len(produced))
        transform_files(root, produced, self.direction, self.password,
                        self.config, self.random_source, report=self.report)
        return self._finish()

    def _transform_stream(self, data: bytes) -> WrapReport:
        if not data:
            self._advance(WrapState.FAILED)
            raise NoFilesProducedError("Command produced no output")

        self._advance(WrapState.TRANSFORMING)
        try:
            if self.direction is Direction.ENCODE:
                sequence = encode_raw(data, self.password, config=self.config,
                                      random_source=self.random_source)
                output = sequence.encode('ascii') + b'\n'
            else:
                output = decode_raw(data, self.password, config=self.config)
        except DendecError as e:
            logger.warning("Failed %s: %s", STREAM_RECORD, e)
            self.report.add(FileRecord(STREAM_RECORD, Outcome.FAILED, original_size=len(data),
                                       error=str(e)))
        else:
            self.report.stream_output = output
            self.report.add(FileRecord(STREAM_RECORD, Outcome.TRANSFORMED, len(data), len(output)))
        return self._finish()

    def _finish(self) -> WrapReport:
        self._advance(WrapState.REPORTING)
        logger.info(self.report.format_summary())
        self._advance(WrapState.DONE)
        return self.report


def run_wrap(
    direction: Direction,
    target: Sequence[str],
    password: Union[str, bytes],
    root: Optional[Union[str, Path]] = None,
    config: Optional[Dict[str, Any]] = None,
    random_source: Optional[RandomSource] = None
) -> WrapReport:
    """Run one wrap session and return its report."""
    session = WrapSession(password, direction, root=root, config=config,
                          random_source=random_source)
    return session.run(target)
