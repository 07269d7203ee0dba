"""Running one test class under its lifecycle strategy."""

import logging
from typing import Iterable, Optional

from casecraft.core.case import Case, CaseInvocation
from casecraft.core.convention import CaseAction, ExecutionConfig
from casecraft.core.discovery import TestClass
from casecraft.core.exceptions import ListenerError, classify
from casecraft.core.models import CaseExecution, CaseStatus, ExecutionSummary
from casecraft.messaging.bus import Bus
from casecraft.messaging.events import CaseFailed, CasePassed, CaseSkipped, ClassCompleted

log = logging.getLogger(__name__)


class ClassRunner:
    """Drives one class's lifecycle and reports each case as it completes."""

    def __init__(self, bus: Bus, execution: ExecutionConfig):
        self.bus = bus
        self.execution = execution

    def run(self, test_class: TestClass, is_only_test_class: bool = False) -> ExecutionSummary:
        """Run a test class and publish its case and class events.

        Returns:
            Summary of every case invocation reported for the class

        Raises:
            ListenerError: If a listener fails while handling an event
        """
        summary = ExecutionSummary()
        reported: set[int] = set()

        def run_cases(action: CaseAction, cases: Optional[Iterable[Case]] = None) -> None:
            for case in test_class.cases if cases is None else cases:
                invocation = CaseInvocation(case)
                try:
                    action(invocation)
                except KeyboardInterrupt:
                    raise
                except BaseException as e:
                    invocation.fail(e)
                self._report(case, invocation.complete(), summary, reported)

        log.debug("Running %s (%d case(s))", test_class.name, len(test_class.cases))

        try:
            self.execution.lifecycle.execute(test_class, run_cases)
        except (ListenerError, KeyboardInterrupt):
            raise
        except BaseException as e:
            # Faults raised by the lifecycle itself land on its cases.
            log.debug("Lifecycle for %s raised %r", test_class.name, e)
            unreported = [c for c in test_class.cases if id(c) not in reported]
            for case in unreported or test_class.cases:
                invocation = CaseInvocation(case)
                invocation.fail(e)
                self._report(case, invocation.complete(), summary, reported)

        self.bus.publish(ClassCompleted(test_class.name, summary, is_only_test_class))
        return summary

    def _report(
        self,
        case: Case,
        execution: CaseExecution,
        summary: ExecutionSummary,
        reported: set[int],
    ) -> None:
        if execution.status is CaseStatus.NOT_STARTED:
            return

        reported.add(id(case))
        summary.add_case(execution)

        if execution.status is CaseStatus.SKIPPED:
            event = CaseSkipped.create(case, execution)
        elif execution.status is CaseStatus.PASSED:
            event = CasePassed.create(case, execution)
        else:
            exception = classify(execution.exceptions, self.execution.assertion_filter)
            event = CaseFailed.create(case, execution, exception)

        self.bus.publish(event)
