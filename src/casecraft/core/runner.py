"""Top-level run orchestration and scope resolution."""

import inspect
import logging
import time
from dataclasses import dataclass, replace
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence, Union

from casecraft.core.case import Method, full_name
from casecraft.core.class_runner import ClassRunner
from casecraft.core.convention import Convention, default_convention
from casecraft.core.discovery import ClassDiscoverer
from casecraft.core.exceptions import AssertionLibraryFilter, ConfigurationError
from casecraft.core.models import ExecutionSummary
from casecraft.messaging.bus import Bus
from casecraft.messaging.events import AssemblyCompleted, AssemblyStarted

log = logging.getLogger(__name__)

ConventionSource = Union[Convention, Callable[[tuple[str, ...]], Convention]]


def nested_types(cls: type) -> Iterator[type]:
    """Yield a class followed by every class nested in it, recursively."""
    yield cls
    for value in vars(cls).values():
        if inspect.isclass(value) and value.__qualname__ == f"{cls.__qualname__}.{value.__name__}":
            yield from nested_types(value)


def in_namespace(cls: type, namespace: str) -> bool:
    module = cls.__module__
    return module == namespace or module.startswith(namespace + ".")


@dataclass(frozen=True)
class TestPool:
    """The candidate types for one run."""

    __test__ = False

    name: str
    types: tuple[type, ...]
    convention: Optional[ConventionSource] = None

    @classmethod
    def from_module(cls, module: ModuleType) -> "TestPool":
        """Collect every class defined in a module, nested classes included.

        A module-level ``convention`` attribute, when present, is carried
        along and used in place of the default convention.
        """
        types: list[type] = []
        for value in vars(module).values():
            if inspect.isclass(value) and value.__module__ == module.__name__:
                if "." not in value.__qualname__:
                    types.extend(nested_types(value))
        return cls(
            name=module.__name__,
            types=tuple(types),
            convention=getattr(module, "convention", None),
        )

    def find(self, class_name: str) -> type:
        for candidate in self.types:
            if full_name(candidate) == class_name:
                return candidate
        raise ConfigurationError(f"Class not found in {self.name}: {class_name}")


@dataclass(frozen=True)
class TestName:
    """One explicitly requested test: a class by full name, a method by name."""

    __test__ = False

    class_name: str
    method_name: str

    @classmethod
    def parse(cls, value: str) -> "TestName":
        """Parse ``module.Class::method``."""
        class_name, sep, method_name = value.partition("::")
        if not sep or not class_name or not method_name:
            raise ConfigurationError(f"Expected 'module.Class::method', got {value!r}")
        return cls(class_name, method_name)


class Runner:
    """Resolves a requested scope to classes and runs them."""

    def __init__(
        self,
        bus: Bus,
        custom_arguments: Sequence[str] = (),
        assertion_modules: Sequence[str] = (),
    ):
        """Initialize the runner.

        Args:
            bus: Bus every run event is published to
            custom_arguments: Passed to a pool's convention factory, if any
            assertion_modules: Extra modules whose exceptions count as assertion failures
        """
        self.bus = bus
        self.custom_arguments = tuple(custom_arguments)
        self.assertion_modules = tuple(assertion_modules)

    def run_pool(self, pool: TestPool) -> ExecutionSummary:
        return self._run(pool, pool.types)

    def run_namespace(self, pool: TestPool, namespace: str) -> ExecutionSummary:
        return self._run(pool, [t for t in pool.types if in_namespace(t, namespace)])

    def run_type(self, pool: TestPool, cls: type) -> ExecutionSummary:
        return self._run(pool, list(nested_types(cls)))

    def run_method(self, pool: TestPool, cls: type, method_name: str) -> ExecutionSummary:
        return self._run(
            pool,
            [cls],
            lambda method: method.owner is cls and method.name == method_name,
        )

    def run_tests(self, pool: TestPool, tests: Iterable[TestName]) -> ExecutionSummary:
        """Run an explicit set of class/method pairs.

        Only the exact methods named survive, whatever the convention's own
        method filters would admit.

        Raises:
            ConfigurationError: If a class is not in the pool, or has no such method
        """
        tests = list(tests)
        types: dict[str, type] = {}
        for test in tests:
            if test.class_name not in types:
                types[test.class_name] = pool.find(test.class_name)
            if not inspect.isfunction(getattr(types[test.class_name], test.method_name, None)):
                raise ConfigurationError(
                    f"Method not found: {test.class_name}.{test.method_name}"
                )

        requested = {(test.class_name, test.method_name) for test in tests}
        return self._run(
            pool,
            list(types.values()),
            lambda method: (full_name(method.owner), method.name) in requested,
        )

    def run_types(
        self, pool: TestPool, convention: Convention, *types: type
    ) -> ExecutionSummary:
        """Run specific types under an explicitly supplied convention."""
        return self._execute(pool, convention, types)

    def _convention(self, pool: TestPool) -> Convention:
        source = pool.convention
        if source is None:
            return default_convention()
        if isinstance(source, Convention):
            return source
        return source(self.custom_arguments)

    def _with_assertion_modules(self, convention: Convention) -> Convention:
        if not self.assertion_modules:
            return convention
        current = convention.execution.assertion_filter
        assertion_filter = AssertionLibraryFilter(
            current.exception_types, current.modules + self.assertion_modules
        )
        return replace(
            convention, execution=replace(convention.execution, assertion_filter=assertion_filter)
        )

    def _run(
        self,
        pool: TestPool,
        candidate_types: Sequence[type],
        method_condition: Optional[Callable[[Method], bool]] = None,
    ) -> ExecutionSummary:
        convention = self._convention(pool)
        if method_condition is not None:
            convention = replace(
                convention, discovery=convention.discovery.where_methods(method_condition)
            )
        return self._execute(pool, convention, candidate_types)

    def _execute(
        self, pool: TestPool, convention: Convention, candidate_types: Sequence[Any]
    ) -> ExecutionSummary:
        convention = self._with_assertion_modules(convention)
        self.bus.publish(AssemblyStarted(pool.name))
        start_time = time.perf_counter()

        test_classes = ClassDiscoverer(convention.discovery).test_classes(candidate_types)
        class_runner = ClassRunner(self.bus, convention.execution)
        is_only_test_class = len(test_classes) == 1

        summary = ExecutionSummary.fold(
            class_runner.run(test_class, is_only_test_class) for test_class in test_classes
        )

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        log.debug(
            "Run of %s completed: %d passed, %d failed, %d skipped",
            pool.name,
            summary.passed,
            summary.failed,
            summary.skipped,
        )
        self.bus.publish(AssemblyCompleted(pool.name, summary, duration_ms))
        return summary
