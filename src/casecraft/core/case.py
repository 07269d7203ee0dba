"""Discovered cases and the handle strategies use to run them."""

import inspect
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Union

from casecraft import markers
from casecraft.core.capture import OutputCapture
from casecraft.core.deferred import resolve
from casecraft.core.exceptions import CaseFailure
from casecraft.core.models import CaseExecution, CaseStatus

M = TypeVar("M")

UNCALLABLE_MESSAGE = (
    "This parameterized test could not be executed, because no input values were available."
)


def full_name(cls: type) -> str:
    """Qualified name of a class, including its module."""
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class Method:
    """A function as reflected from a particular class."""

    owner: type
    function: Callable[..., Any]

    @property
    def name(self) -> str:
        return self.function.__name__

    @property
    def parameter_count(self) -> int:
        """Number of parameters besides the instance."""
        parameters = list(inspect.signature(self.function).parameters.values())
        return len(parameters[1:])

    def has_marker(self, marker_type: type) -> bool:
        return markers.has_marker(self.function, marker_type)

    def get_marker(self, marker_type: type[M]) -> Optional[M]:
        return markers.get_marker(self.function, marker_type)


class Case:
    """One test method, optionally bound to one argument set."""

    def __init__(self, method: Method, parameters: Optional[tuple[Any, ...]] = None):
        self.method = method
        self.parameters = parameters

    @property
    def class_name(self) -> str:
        return full_name(self.method.owner)

    @property
    def method_name(self) -> str:
        return self.method.name

    @property
    def name(self) -> str:
        name = f"{self.class_name}.{self.method_name}"
        if self.parameters is not None:
            name += "(" + ", ".join(repr(p) for p in self.parameters) + ")"
        return name

    def __repr__(self) -> str:
        return f"<Case {self.name}>"

    def execute(self, instance: Any) -> CaseExecution:
        """Invoke the method against an instance and record what happened."""
        execution = CaseExecution()
        start_time = time.perf_counter()

        with OutputCapture() as capture:
            try:
                result = self.method.function(instance, *(self.parameters or ()))
                execution.return_value = resolve(result)
            except KeyboardInterrupt:
                raise
            except BaseException as e:
                execution.exceptions.append(e)

        execution.duration_ms = int((time.perf_counter() - start_time) * 1000)
        execution.output = capture.output
        execution.complete(CaseStatus.FAILED if execution.exceptions else CaseStatus.PASSED)
        return execution


class UncallableParameterizedCase(Case):
    """A parameterized case for which no argument sets were available."""

    def execute(self, instance: Any) -> CaseExecution:
        execution = CaseExecution(exceptions=[ValueError(UNCALLABLE_MESSAGE)])
        execution.complete(CaseStatus.FAILED)
        return execution


class CaseInvocation:
    """One invocation of a case, as handed to a lifecycle strategy's action.

    The strategy decides what happens: ``execute`` runs the body,
    ``skip`` records a skip, ``fail`` attaches a fault. The status is
    settled once, by ``complete``, after the action returns.
    """

    def __init__(self, case: Case):
        self.case = case
        self._execution = CaseExecution()
        self._executed = False
        self._skipped = False

    @property
    def name(self) -> str:
        return self.case.name

    @property
    def method(self) -> Method:
        return self.case.method

    @property
    def exceptions(self) -> list[BaseException]:
        return list(self._execution.exceptions)

    @property
    def return_value(self) -> Any:
        return self._execution.return_value

    def execute(self, instance: Any) -> Any:
        """Run the case body against an instance and return its result.

        Raises:
            RuntimeError: If the case was already skipped
        """
        if self._skipped:
            raise RuntimeError(f"Cannot execute {self.name}: it was already skipped")
        result = self.case.execute(instance)
        self._executed = True
        self._execution.duration_ms += result.duration_ms
        self._execution.output += result.output
        self._execution.exceptions.extend(result.exceptions)
        self._execution.return_value = result.return_value
        return result.return_value

    def skip(self, reason: Optional[str] = None) -> None:
        """Record a skip. A case whose body already ran cannot be skipped."""
        if self._executed:
            raise RuntimeError(f"Cannot skip {self.name}: its body already ran")
        self._skipped = True
        self._execution.skip_reason = reason

    def fail(self, reason: Union[str, BaseException]) -> None:
        if not isinstance(reason, BaseException):
            reason = CaseFailure(reason)
        self._execution.exceptions.append(reason)

    def complete(self) -> CaseExecution:
        """Settle the status of this invocation and return its record."""
        if self._execution.exceptions:
            self._execution.complete(CaseStatus.FAILED)
        elif self._skipped:
            self._execution.complete(CaseStatus.SKIPPED)
        elif self._executed:
            self._execution.complete(CaseStatus.PASSED)
        return self._execution
