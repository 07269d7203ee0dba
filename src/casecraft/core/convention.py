"""Conventions: discovery and execution policy as plain data.

A convention is a ``DiscoveryConfig`` (which classes and methods are tests,
in what order, with what arguments) plus an ``ExecutionConfig`` (how each
class's cases are constructed, skipped and run). Both are immutable; the
``where_*`` / ``order_*`` / ``with_*`` helpers return modified copies.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from casecraft.core.case import CaseInvocation, Method
from casecraft.core.exceptions import AssertionLibraryFilter
from casecraft.markers import Cases, Skip, get_marker, get_markers

if TYPE_CHECKING:
    from casecraft.core.discovery import TestClass

ClassFilter = Callable[[type], bool]
MethodFilter = Callable[[Method], bool]
MethodOrder = Callable[[Sequence[Method]], Iterable[Method]]
ParameterSource = Callable[[Method], Iterable[tuple[Any, ...]]]
CaseAction = Callable[[CaseInvocation], None]
RunCases = Callable[..., None]


def cases_from_markers(method: Method) -> Iterable[tuple[Any, ...]]:
    """Yield the argument sets declared with ``@cases(...)``."""
    for marker in get_markers(method.function, Cases):
        yield marker.args


@dataclass(frozen=True)
class DiscoveryConfig:
    """Which classes and methods are tests, and how they are ordered."""

    class_filters: tuple[ClassFilter, ...] = ()
    method_filters: tuple[MethodFilter, ...] = ()
    method_order: MethodOrder = list
    parameter_sources: tuple[ParameterSource, ...] = (cases_from_markers,)

    def where_classes(self, condition: ClassFilter) -> "DiscoveryConfig":
        return replace(self, class_filters=self.class_filters + (condition,))

    def where_methods(self, condition: MethodFilter) -> "DiscoveryConfig":
        return replace(self, method_filters=self.method_filters + (condition,))

    def order_methods_by(self, key: Callable[[Method], Any], reverse: bool = False) -> "DiscoveryConfig":
        return replace(self, method_order=lambda methods: sorted(methods, key=key, reverse=reverse))

    def with_parameter_source(self, source: ParameterSource) -> "DiscoveryConfig":
        return replace(self, parameter_sources=self.parameter_sources + (source,))


class Lifecycle(ABC):
    """Policy for constructing, skipping and running one class's cases."""

    @abstractmethod
    def execute(self, test_class: "TestClass", run_cases: RunCases) -> None:
        """Run the cases of a test class.

        Args:
            test_class: The class under test, with its discovered cases
            run_cases: Callback taking a per-case action (and optionally the
                cases to run, in order). Each call invokes the action once per
                case against a fresh CaseInvocation. It may be called any
                number of times; a case whose action neither executes, skips
                nor fails it is left out of the results.
        """
        pass


class CreateInstancePerCase(Lifecycle):
    """Construct a fresh instance for every case and close it afterwards.

    Cases marked with ``@skip``, and every case of a class marked with it,
    are skipped without constructing anything. A case marker wins over the
    class marker.
    """

    def execute(self, test_class: "TestClass", run_cases: RunCases) -> None:
        class_marker = get_marker(test_class.type, Skip)

        def action(case: CaseInvocation) -> None:
            marker = case.method.get_marker(Skip) or class_marker
            if marker is not None:
                case.skip(marker.reason)
                return

            instance = test_class.construct()
            try:
                case.execute(instance)
            finally:
                test_class.dispose(instance)

        run_cases(action)


@dataclass(frozen=True)
class ExecutionConfig:
    """How cases are run, and how their failures are classified."""

    lifecycle: Lifecycle = field(default_factory=CreateInstancePerCase)
    assertion_filter: AssertionLibraryFilter = field(default_factory=AssertionLibraryFilter)


@dataclass(frozen=True)
class Convention:
    """One discovery config paired with one execution config."""

    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)


def default_convention() -> Convention:
    """Classes named ``*Tests``; their public methods in declaration order.

    ``close`` is the disposal hook, never a case.
    """
    discovery = (
        DiscoveryConfig()
        .where_classes(lambda cls: cls.__name__.endswith("Tests"))
        .where_methods(lambda method: method.name != "close")
    )
    return Convention(discovery=discovery, execution=ExecutionConfig())
