"""Shared fixtures for the test suite."""

import pytest

from casecraft.messaging import Bus, Listener


class RecordingListener(Listener):
    """Remembers every event it receives, in order."""

    def __init__(self):
        self.events = []

    def on_assembly_started(self, event):
        self.events.append(event)

    def on_case_skipped(self, event):
        self.events.append(event)

    def on_case_passed(self, event):
        self.events.append(event)

    def on_case_failed(self, event):
        self.events.append(event)

    def on_class_completed(self, event):
        self.events.append(event)

    def on_assembly_completed(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]

    def case_lines(self):
        """One line per case event: short method name plus outcome."""
        lines = []
        for event in self.events:
            status = getattr(event, "status", None)
            if status is None:
                continue
            line = f"{event.method_name} {status.value}"
            exception = getattr(event, "exception", None)
            if exception is not None:
                line += f": {exception.message}"
            elif getattr(event, "skip_reason", None):
                line += f": {event.skip_reason}"
            lines.append(line)
        return lines


@pytest.fixture
def recorder():
    return RecordingListener()


@pytest.fixture
def bus(recorder):
    return Bus(recorder)
