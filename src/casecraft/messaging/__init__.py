"""Run events and their delivery to listeners."""

from casecraft.messaging.bus import Bus, Listener
from casecraft.messaging.events import (
    AssemblyCompleted,
    AssemblyStarted,
    CaseCompleted,
    CaseFailed,
    CasePassed,
    CaseSkipped,
    ClassCompleted,
)

__all__ = [
    "Bus",
    "Listener",
    "AssemblyStarted",
    "AssemblyCompleted",
    "CaseCompleted",
    "CaseFailed",
    "CasePassed",
    "CaseSkipped",
    "ClassCompleted",
]
