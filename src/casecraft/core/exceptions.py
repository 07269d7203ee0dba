"""Error types and failure classification."""

import sys
import traceback
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence


class CasecraftError(Exception):
    """Base class for errors raised by the engine itself."""


class DiscoveryError(CasecraftError):
    """A class filter, method filter, ordering or parameter source raised."""


class ListenerError(CasecraftError):
    """A listener raised while handling an event. Fatal to the run."""


class ConfigurationError(CasecraftError):
    """A requested class or method could not be resolved."""


class CaseFailure(Exception):
    """Carries a failure reason given as text rather than as an exception."""


class AssertionLibraryFilter:
    """Recognizes exceptions that come from an assertion library.

    An exception counts as an assertion failure when it is an instance of a
    registered exception type, or when its type is defined in a registered
    module (or a submodule of one). Frames from registered modules are also
    hidden from rendered stack traces.
    """

    def __init__(
        self,
        exception_types: Iterable[type[BaseException]] = (AssertionError,),
        modules: Iterable[str] = (),
    ):
        self.exception_types = tuple(exception_types)
        self.modules = tuple(modules)

    def add_exception_type(self, exception_type: type[BaseException]) -> "AssertionLibraryFilter":
        self.exception_types += (exception_type,)
        return self

    def add_module(self, module: str) -> "AssertionLibraryFilter":
        self.modules += (module,)
        return self

    def _in_library(self, module_name: Optional[str]) -> bool:
        if not module_name:
            return False
        return any(
            module_name == m or module_name.startswith(m + ".") for m in self.modules
        )

    def is_assertion_failure(self, exception: BaseException) -> bool:
        if isinstance(exception, self.exception_types):
            return True
        return self._in_library(type(exception).__module__)

    __call__ = is_assertion_failure

    def filter_stack_trace(self, exception: BaseException) -> str:
        """Render the exception's traceback without assertion library frames."""
        hidden = self._library_files()
        frames = [
            frame
            for frame in traceback.extract_tb(exception.__traceback__)
            if frame.filename not in hidden
        ]
        lines = traceback.format_list(frames)
        lines.extend(traceback.format_exception_only(type(exception), exception))
        return "".join(lines).rstrip("\n")

    def _library_files(self) -> set[str]:
        if not self.modules:
            return set()
        return {
            module.__file__
            for name, module in list(sys.modules.items())
            if self._in_library(name) and getattr(module, "__file__", None)
        }


@dataclass(frozen=True)
class ClassifiedException:
    """One raw exception plus whether it came from an assertion library."""

    exception: BaseException
    is_assertion_failure: bool

    @property
    def type_name(self) -> str:
        return type(self.exception).__name__

    @property
    def message(self) -> str:
        return str(self.exception)


@dataclass(frozen=True)
class CompoundException:
    """Every fault of one failed case, merged into one reportable failure.

    This is a report value, never raised.
    """

    entries: tuple[ClassifiedException, ...]
    stack_trace: str = ""
    secondary_stack_traces: tuple[str, ...] = field(default=())

    @property
    def exceptions(self) -> list[BaseException]:
        return [entry.exception for entry in self.entries]

    @property
    def primary(self) -> ClassifiedException:
        return self.entries[0]

    @property
    def secondary_failures(self) -> list[ClassifiedException]:
        return list(self.entries[1:])

    @property
    def failed_assertion(self) -> bool:
        return self.primary.is_assertion_failure

    @property
    def type_name(self) -> str:
        return "Assertion Failure" if self.failed_assertion else self.primary.type_name

    @property
    def message(self) -> str:
        if len(self.entries) == 1:
            return self.primary.message
        return f"{len(self.entries)} exceptions were raised."


def classify(
    exceptions: Sequence[BaseException],
    is_assertion_failure: Callable[[BaseException], bool],
) -> CompoundException:
    """Merge one or more exceptions, in raise order, into a CompoundException."""
    if not exceptions:
        raise ValueError("At least one exception is required")

    entries = tuple(
        ClassifiedException(exception, bool(is_assertion_failure(exception)))
        for exception in exceptions
    )

    if isinstance(is_assertion_failure, AssertionLibraryFilter):
        render = is_assertion_failure.filter_stack_trace
    else:
        render = _render

    return CompoundException(
        entries=entries,
        stack_trace=render(exceptions[0]),
        secondary_stack_traces=tuple(render(e) for e in exceptions[1:]),
    )


def _render(exception: BaseException) -> str:
    return "".join(
        traceback.format_exception(type(exception), exception, exception.__traceback__)
    ).rstrip("\n")
