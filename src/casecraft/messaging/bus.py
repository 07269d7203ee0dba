"""Synchronous, ordered event delivery to listeners."""

from typing import Any

from casecraft.core.exceptions import ListenerError
from casecraft.messaging.events import (
    AssemblyCompleted,
    AssemblyStarted,
    CaseFailed,
    CasePassed,
    CaseSkipped,
    ClassCompleted,
)

HANDLERS = {
    AssemblyStarted: "on_assembly_started",
    CaseSkipped: "on_case_skipped",
    CasePassed: "on_case_passed",
    CaseFailed: "on_case_failed",
    ClassCompleted: "on_class_completed",
    AssemblyCompleted: "on_assembly_completed",
}


class Listener:
    """Receives run events. Override only the handlers you need."""

    def on_assembly_started(self, event: AssemblyStarted) -> None:
        pass

    def on_case_skipped(self, event: CaseSkipped) -> None:
        pass

    def on_case_passed(self, event: CasePassed) -> None:
        pass

    def on_case_failed(self, event: CaseFailed) -> None:
        pass

    def on_class_completed(self, event: ClassCompleted) -> None:
        pass

    def on_assembly_completed(self, event: AssemblyCompleted) -> None:
        pass


class Bus:
    """Delivers each event to every listener, in subscription order.

    Any object may subscribe; handlers it does not define are skipped.
    Publishing returns only after every listener has handled the event.
    """

    def __init__(self, *listeners: Any):
        self.listeners: list[Any] = list(listeners)

    def subscribe(self, listener: Any) -> None:
        self.listeners.append(listener)

    def publish(self, event: Any) -> None:
        """Publish an event.

        Raises:
            ListenerError: If a listener raises; the run cannot continue
        """
        handler_name = HANDLERS.get(type(event))
        if handler_name is None:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

        for listener in self.listeners:
            handler = getattr(listener, handler_name, None)
            if handler is None:
                continue
            try:
                handler(event)
            except Exception as e:
                raise ListenerError(
                    f"{type(listener).__name__}.{handler_name} failed: {e}"
                ) from e
