"""Test class and case discovery."""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from casecraft.core.case import Case, Method, UncallableParameterizedCase, full_name
from casecraft.core.convention import DiscoveryConfig
from casecraft.core.exceptions import DiscoveryError

log = logging.getLogger(__name__)


@dataclass
class TestClass:
    """A class that survived discovery, with its cases in run order."""

    __test__ = False

    type: type
    cases: list[Case] = field(default_factory=list)

    @property
    def name(self) -> str:
        return full_name(self.type)

    def construct(self) -> Any:
        """Create a new instance of the class under test."""
        return self.type()

    def dispose(self, instance: Any) -> None:
        """Release an instance, calling its ``close()`` when it has one."""
        close = getattr(instance, "close", None)
        if callable(close):
            close()


def declared_methods(cls: type) -> list[Method]:
    """Public functions of a class and its bases, base declarations first.

    An override keeps the position of the method it overrides.
    """
    functions: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name.startswith("_") or not inspect.isfunction(value):
                continue
            functions[name] = value
    return [Method(cls, function) for function in functions.values()]


class ClassDiscoverer:
    """Filters a pool of candidate types down to test classes and cases."""

    def __init__(self, config: DiscoveryConfig):
        self.config = config

    def test_classes(self, candidate_types: Iterable[type]) -> list[TestClass]:
        """Discover test classes, dropping any left without cases.

        Raises:
            DiscoveryError: If a filter, ordering or parameter source raises
        """
        test_classes = []
        for candidate in candidate_types:
            if not self._is_test_class(candidate):
                continue

            cases = self._cases(candidate)
            if not cases:
                log.debug("Skipping %s: no test methods", full_name(candidate))
                continue

            test_classes.append(TestClass(candidate, cases))

        log.debug("Discovered %d test class(es)", len(test_classes))
        return test_classes

    def _is_test_class(self, candidate: type) -> bool:
        try:
            return all(condition(candidate) for condition in self.config.class_filters)
        except Exception as e:
            raise DiscoveryError(
                f"Class filter raised while inspecting {full_name(candidate)}: {e}"
            ) from e

    def _cases(self, cls: type) -> list[Case]:
        try:
            methods = [
                method
                for method in declared_methods(cls)
                if all(condition(method) for condition in self.config.method_filters)
            ]
            ordered = list(self.config.method_order(methods))
        except Exception as e:
            raise DiscoveryError(
                f"Method filter or ordering raised while inspecting {full_name(cls)}: {e}"
            ) from e

        cases: list[Case] = []
        for method in ordered:
            cases.extend(self._cases_for(method))
        return cases

    def _cases_for(self, method: Method) -> list[Case]:
        if method.parameter_count == 0:
            return [Case(method)]

        try:
            argument_sets = [
                tuple(arguments)
                for source in self.config.parameter_sources
                for arguments in source(method)
            ]
        except Exception as e:
            raise DiscoveryError(
                f"Parameter source raised for {full_name(method.owner)}.{method.name}: {e}"
            ) from e

        if not argument_sets:
            return [UncallableParameterizedCase(method)]
        return [Case(method, arguments) for arguments in argument_sets]
