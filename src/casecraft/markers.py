"""Case and class markers.

Markers are attached to functions or classes by decorators and queried by
type, never by name. The engine only ever asks ``has_marker`` /
``get_marker``; how markers are stored is private to this module.
"""

from dataclasses import dataclass
from typing import Any, Optional, TypeVar

_MARKERS_ATTR = "__casecraft_markers__"

M = TypeVar("M")


@dataclass(frozen=True)
class Skip:
    """Marks a case (or class) to be skipped without being constructed."""

    reason: Optional[str] = None


@dataclass(frozen=True)
class Cases:
    """One argument set for a parameterized case."""

    args: tuple[Any, ...] = ()


def add_marker(target: Any, marker: Any) -> Any:
    """Register a marker on a function or class and return the target."""
    # Read through __dict__ so a subclass does not inherit its base's markers.
    existing = vars(target).get(_MARKERS_ATTR, ())
    setattr(target, _MARKERS_ATTR, existing + (marker,))
    return target


def get_markers(target: Any, marker_type: type[M]) -> list[M]:
    """Return every marker of the given type, in declaration order."""
    markers = getattr(target, "__dict__", {}).get(_MARKERS_ATTR, ())
    # Decorators apply bottom-up; reverse to get top-down source order.
    return [m for m in reversed(markers) if isinstance(m, marker_type)]


def get_marker(target: Any, marker_type: type[M]) -> Optional[M]:
    markers = get_markers(target, marker_type)
    return markers[0] if markers else None


def has_marker(target: Any, marker_type: type) -> bool:
    return get_marker(target, marker_type) is not None


def skip(reason: Optional[str] = None):
    """Decorator: skip this case, optionally recording why.

    Usable bare (``@skip``) or called (``@skip("flaky on CI")``).
    """
    if callable(reason):
        return add_marker(reason, Skip())

    def decorator(target):
        return add_marker(target, Skip(reason))

    return decorator


def cases(*args: Any):
    """Decorator: supply one argument set to a parameterized case."""

    def decorator(target):
        return add_marker(target, Cases(tuple(args)))

    return decorator
