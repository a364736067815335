# file: module5_wrap/report.py
"""
Wrap result tally and summary formatting.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import List, Optional

from .classify import Direction, SkipReason


class Outcome(Enum):
    TRANSFORMED = "transformed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class FileRecord:
    relative_path: PurePath
    outcome: Outcome
    original_size: int = 0
    output_size: int = 0
    reason: Optional[SkipReason] = None
    error: Optional[str] = None


def human_size(num_bytes: int) -> str:
    """Format a byte count as '512 B', '2.0 KB' or '1.5 MB'."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


@dataclass
class WrapReport:
    """Per-file records of one wrap invocation."""
    direction: Direction
    records: List[FileRecord] = field(default_factory=list)
    stream_output: Optional[bytes] = None

    def add(self, record: FileRecord) -> None:
        self.records.append(record)

    def _count(self, outcome: Outcome) -> int:
        return sum(1 for r in self.records if r.outcome is outcome)

    @property
    def transformed(self) -> int:
        return self._count(Outcome.TRANSFORMED)

    @property
    def skipped(self) -> int:
        return self._count(Outcome.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(Outcome.FAILED)

    @property
    def failures(self) -> List[FileRecord]:
        return [r for r in self.records if r.outcome is Outcome.FAILED]

    @property
    def bytes_before(self) -> int:
        return sum(r.original_size for r in self.records if r.outcome is Outcome.TRANSFORMED)

    @property
    def bytes_after(self) -> int:
        return sum(r.output_size for r in self.records if r.outcome is Outcome.TRANSFORMED)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def format_summary(self) -> str:
        lines = [
            f"{self.transformed} files {self.direction.value}d | "
            f"{self.skipped} skipped | {self.failed} failed"
        ]
        if self.transformed:
            lines.append(
                f"{human_size(self.bytes_before)} -> {human_size(self.bytes_after)}"
            )
        if self.failures:
            lines.append("Failures:")
            for record in self.failures:
                lines.append(f"  {record.relative_path}: {record.error}")
        return '\n'.join(lines)
