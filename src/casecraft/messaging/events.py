"""Events published to listeners during a run."""

from dataclasses import dataclass
from typing import Optional

from casecraft.core.case import Case
from casecraft.core.exceptions import CompoundException
from casecraft.core.models import CaseExecution, CaseStatus, ExecutionSummary


@dataclass(frozen=True)
class AssemblyStarted:
    pool: str


@dataclass(frozen=True)
class CaseCompleted:
    """Common shape of the three per-case events."""

    class_name: str
    method_name: str
    name: str
    status: CaseStatus
    duration_ms: int
    output: str
    skip_reason: Optional[str] = None


@dataclass(frozen=True)
class CaseSkipped(CaseCompleted):
    @classmethod
    def create(cls, case: Case, execution: CaseExecution) -> "CaseSkipped":
        return cls(
            class_name=case.class_name,
            method_name=case.method_name,
            name=case.name,
            status=CaseStatus.SKIPPED,
            duration_ms=execution.duration_ms,
            output=execution.output,
            skip_reason=execution.skip_reason,
        )


@dataclass(frozen=True)
class CasePassed(CaseCompleted):
    return_value: object = None

    @classmethod
    def create(cls, case: Case, execution: CaseExecution) -> "CasePassed":
        return cls(
            class_name=case.class_name,
            method_name=case.method_name,
            name=case.name,
            status=CaseStatus.PASSED,
            duration_ms=execution.duration_ms,
            output=execution.output,
            return_value=execution.return_value,
        )


@dataclass(frozen=True)
class CaseFailed(CaseCompleted):
    exception: Optional[CompoundException] = None

    @classmethod
    def create(
        cls, case: Case, execution: CaseExecution, exception: CompoundException
    ) -> "CaseFailed":
        return cls(
            class_name=case.class_name,
            method_name=case.method_name,
            name=case.name,
            status=CaseStatus.FAILED,
            duration_ms=execution.duration_ms,
            output=execution.output,
            exception=exception,
        )


@dataclass(frozen=True)
class ClassCompleted:
    class_name: str
    summary: ExecutionSummary
    is_only_class: bool = False


@dataclass(frozen=True)
class AssemblyCompleted:
    pool: str
    summary: ExecutionSummary
    duration_ms: int
