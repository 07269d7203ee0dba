"""Data models for case executions and run summaries."""

from dataclasses import dataclass, field
from enum import Enum
from functools import reduce
from typing import Any, Iterable, Optional


class CaseStatus(str, Enum):
    """Status of a single case execution."""

    NOT_STARTED = "not_started"
    SKIPPED = "skipped"
    PASSED = "passed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not CaseStatus.NOT_STARTED


@dataclass
class CaseExecution:
    """Mutable record of one invocation of one case."""

    status: CaseStatus = CaseStatus.NOT_STARTED
    duration_ms: int = 0
    output: str = ""
    exceptions: list[BaseException] = field(default_factory=list)
    skip_reason: Optional[str] = None
    return_value: Any = None

    def complete(self, status: CaseStatus) -> None:
        """Move from NOT_STARTED to a terminal status, exactly once."""
        if self.status.is_terminal:
            raise RuntimeError(f"Case execution already completed as {self.status.value}")
        if not status.is_terminal:
            raise ValueError("A case execution must complete with a terminal status")
        if status is not CaseStatus.FAILED and self.exceptions:
            raise ValueError("A case execution with exceptions can only fail")
        self.status = status

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "output": self.output,
            "exceptions": [f"{type(e).__name__}: {e}" for e in self.exceptions],
            "skip_reason": self.skip_reason,
        }


@dataclass
class ExecutionSummary:
    """Pass/fail/skip totals for a case, class or assembly."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration_ms: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped

    def add_case(self, execution: CaseExecution) -> None:
        """Count one completed case execution."""
        if execution.status is CaseStatus.PASSED:
            self.passed += 1
        elif execution.status is CaseStatus.FAILED:
            self.failed += 1
        elif execution.status is CaseStatus.SKIPPED:
            self.skipped += 1
        else:
            raise ValueError("Cannot summarize a case execution that never completed")
        self.duration_ms += execution.duration_ms

    def add(self, other: "ExecutionSummary") -> None:
        """Fold another summary into this one."""
        self.passed += other.passed
        self.failed += other.failed
        self.skipped += other.skipped
        self.duration_ms += other.duration_ms

    def __add__(self, other: "ExecutionSummary") -> "ExecutionSummary":
        combined = ExecutionSummary()
        combined.add(self)
        combined.add(other)
        return combined

    @classmethod
    def fold(cls, summaries: Iterable["ExecutionSummary"]) -> "ExecutionSummary":
        """Combine any number of summaries; folding nothing yields all zeros."""
        return reduce(lambda acc, s: acc + s, summaries, cls())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration_ms": self.duration_ms,
        }
