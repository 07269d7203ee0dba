"""Tests for class and case discovery."""

import pytest

from casecraft.core.case import UncallableParameterizedCase
from casecraft.core.convention import DiscoveryConfig, default_convention
from casecraft.core.discovery import ClassDiscoverer, TestClass, declared_methods
from casecraft.core.exceptions import DiscoveryError
from casecraft.markers import cases


class Base:
    def inherited(self):
        pass

    def overridden(self):
        pass


class SampleTests(Base):
    def zeta(self):
        pass

    def alpha(self):
        pass

    def overridden(self):
        pass

    def _private(self):
        pass

    @staticmethod
    def static_helper():
        pass


class ParameterizedTests:
    @cases(1, 2)
    @cases(3, 4)
    def adds(self, a, b):
        pass

    def unsupplied(self, value):
        pass


class EmptyTests:
    pass


class NoMatchingMethods:
    def helper(self):
        pass


def names(test_class):
    return [case.method_name for case in test_class.cases]


class TestDeclaredMethods:
    """Tests for method enumeration."""

    def test_base_methods_first_and_override_keeps_position(self):
        methods = [m.name for m in declared_methods(SampleTests)]
        assert methods == ["inherited", "overridden", "zeta", "alpha"]

    def test_methods_reflected_from_requested_class(self):
        methods = declared_methods(SampleTests)
        assert all(m.owner is SampleTests for m in methods)

    def test_override_resolves_to_derived_function(self):
        methods = {m.name: m for m in declared_methods(SampleTests)}
        assert methods["overridden"].function is SampleTests.overridden


class TestClassDiscoverer:
    """Tests for ClassDiscoverer."""

    def test_class_filters_combine_with_and(self):
        config = (
            DiscoveryConfig()
            .where_classes(lambda cls: cls.__name__.endswith("Tests"))
            .where_classes(lambda cls: cls.__name__.startswith("Sample"))
        )

        classes = ClassDiscoverer(config).test_classes([SampleTests, ParameterizedTests, Base])

        assert [c.type for c in classes] == [SampleTests]

    def test_method_filters_and_ordering(self):
        config = (
            DiscoveryConfig()
            .where_methods(lambda m: m.name != "inherited")
            .order_methods_by(lambda m: m.name)
        )

        [test_class] = ClassDiscoverer(config).test_classes([SampleTests])

        assert names(test_class) == ["alpha", "overridden", "zeta"]

    def test_classes_without_cases_are_dropped(self):
        config = DiscoveryConfig().where_methods(lambda m: m.name != "helper")

        classes = ClassDiscoverer(config).test_classes(
            [EmptyTests, NoMatchingMethods, SampleTests]
        )

        assert [c.type for c in classes] == [SampleTests]
        assert all(c.cases for c in classes)

    @pytest.mark.parametrize(
        "config",
        [
            DiscoveryConfig(),
            DiscoveryConfig().where_methods(lambda m: False),
            DiscoveryConfig().where_classes(lambda cls: True).where_methods(lambda m: "a" in m.name),
            default_convention().discovery,
        ],
    )
    def test_never_returns_empty_class(self, config):
        candidates = [Base, SampleTests, ParameterizedTests, EmptyTests, NoMatchingMethods]
        for test_class in ClassDiscoverer(config).test_classes(candidates):
            assert len(test_class.cases) > 0

    def test_candidate_order_preserved(self):
        classes = ClassDiscoverer(DiscoveryConfig()).test_classes([SampleTests, Base])
        assert [c.type for c in classes] == [SampleTests, Base]

    def test_parameterized_cases_from_markers(self):
        config = DiscoveryConfig().where_methods(lambda m: m.name == "adds")

        [test_class] = ClassDiscoverer(config).test_classes([ParameterizedTests])

        assert [case.parameters for case in test_class.cases] == [(1, 2), (3, 4)]

    def test_extra_parameter_source(self):
        config = (
            DiscoveryConfig()
            .where_methods(lambda m: m.name == "unsupplied")
            .with_parameter_source(lambda m: [("a",), ("b",)])
        )

        [test_class] = ClassDiscoverer(config).test_classes([ParameterizedTests])

        assert [case.parameters for case in test_class.cases] == [("a",), ("b",)]

    def test_parameterized_method_without_arguments_is_uncallable(self):
        config = DiscoveryConfig().where_methods(lambda m: m.name == "unsupplied")

        [test_class] = ClassDiscoverer(config).test_classes([ParameterizedTests])

        assert len(test_class.cases) == 1
        assert isinstance(test_class.cases[0], UncallableParameterizedCase)

    def test_raising_class_filter_is_discovery_error(self):
        def broken(cls):
            raise KeyError("metadata")

        config = DiscoveryConfig().where_classes(broken)

        with pytest.raises(DiscoveryError) as exc_info:
            ClassDiscoverer(config).test_classes([SampleTests])
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_raising_ordering_is_discovery_error(self):
        def broken(methods):
            raise ValueError("cannot order")

        config = DiscoveryConfig(method_order=broken)

        with pytest.raises(DiscoveryError):
            ClassDiscoverer(config).test_classes([SampleTests])

    def test_raising_parameter_source_is_discovery_error(self):
        def broken(method):
            raise RuntimeError("no data")

        config = DiscoveryConfig(parameter_sources=(broken,))

        with pytest.raises(DiscoveryError):
            ClassDiscoverer(config).test_classes([ParameterizedTests])


class TestTestClass:
    """Tests for TestClass construction and disposal."""

    def test_construct_creates_fresh_instances(self):
        test_class = TestClass(SampleTests)
        assert test_class.construct() is not test_class.construct()
        assert test_class.name.endswith(".SampleTests")

    def test_dispose_calls_close(self):
        closed = []

        class Closing:
            def close(self):
                closed.append(self)

        instance = Closing()
        TestClass(Closing).dispose(instance)
        assert closed == [instance]

    def test_dispose_without_close_is_noop(self):
        TestClass(SampleTests).dispose(SampleTests())
