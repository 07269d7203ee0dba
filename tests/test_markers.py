"""Tests for case markers."""

from casecraft.markers import Cases, Skip, cases, get_marker, get_markers, has_marker, skip


class TestSkipMarker:
    """Tests for the skip decorator."""

    def test_bare_decorator_has_no_reason(self):
        @skip
        def case():
            pass

        assert has_marker(case, Skip)
        assert get_marker(case, Skip).reason is None

    def test_called_decorator_records_reason(self):
        @skip("flaky")
        def case():
            pass

        assert get_marker(case, Skip) == Skip("flaky")

    def test_unmarked_function(self):
        def case():
            pass

        assert not has_marker(case, Skip)
        assert get_marker(case, Skip) is None

    def test_class_markers_are_not_inherited(self):
        @skip("base only")
        class Base:
            pass

        class Derived(Base):
            pass

        assert has_marker(Base, Skip)
        assert not has_marker(Derived, Skip)


class TestCasesMarker:
    """Tests for the cases decorator."""

    def test_markers_in_source_order(self):
        @cases(1, 2)
        @cases(3, 4)
        def case(a, b):
            pass

        assert [m.args for m in get_markers(case, Cases)] == [(1, 2), (3, 4)]

    def test_marker_types_are_kept_apart(self):
        @skip
        @cases("x")
        def case(value):
            pass

        assert len(get_markers(case, Cases)) == 1
        assert len(get_markers(case, Skip)) == 1
