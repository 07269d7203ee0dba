"""Console reporting of run events."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from casecraft.core.models import ExecutionSummary
from casecraft.messaging.bus import Listener
from casecraft.messaging.events import (
    AssemblyCompleted,
    AssemblyStarted,
    CaseFailed,
    CaseSkipped,
    ClassCompleted,
)


class ConsoleListener(Listener):
    """Prints failures and skips as they happen, and a summary at the end."""

    def __init__(self, console: Optional[Console] = None, show_output: bool = True):
        self.console = console or Console()
        self.show_output = show_output

    def on_assembly_started(self, event: AssemblyStarted) -> None:
        self.console.print(f"[bold]------ Testing {escape(event.pool)} ------[/bold]")

    def on_case_skipped(self, event: CaseSkipped) -> None:
        line = f"[yellow]Test '{escape(event.name)}' skipped[/yellow]"
        if event.skip_reason:
            line += f": {escape(event.skip_reason)}"
        self.console.print(line)

    def on_case_failed(self, event: CaseFailed) -> None:
        exception = event.exception
        self.console.print(f"\n[red]Test '{escape(event.name)}' failed:[/red] {escape(exception.type_name)}")
        self.console.print(escape(exception.message))

        if self.show_output and event.output:
            self.console.print("[dim]--- Output ---[/dim]")
            self.console.print(escape(event.output.rstrip("\n")))

        self.console.print(escape(exception.stack_trace), style="dim")
        for entry, trace in zip(exception.secondary_failures, exception.secondary_stack_traces):
            self.console.print(f"\n[dim]===== Secondary Failure: {escape(entry.type_name)} =====[/dim]")
            self.console.print(escape(entry.message))
            self.console.print(escape(trace), style="dim")
        self.console.print()

    def on_class_completed(self, event: ClassCompleted) -> None:
        if event.is_only_class:
            self.console.print(f"[dim]{escape(event.class_name)}: {summary_line(event.summary)}[/dim]")

    def on_assembly_completed(self, event: AssemblyCompleted) -> None:
        summary = event.summary

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Total", str(summary.total))
        table.add_row("Passed", f"[green]{summary.passed}[/green]")
        table.add_row("Failed", f"[red]{summary.failed}[/red]")
        table.add_row("Skipped", f"[yellow]{summary.skipped}[/yellow]")
        table.add_row("Duration", f"{event.duration_ms / 1000:.2f}s")

        self.console.print(table)

        if summary.total == 0:
            self.console.print("[yellow]No tests found.[/yellow]")
        elif summary.failed > 0:
            self.console.print("[red]Some tests failed![/red]")
        else:
            self.console.print("[green]All tests passed![/green]")


def summary_line(summary: ExecutionSummary) -> str:
    """Render a summary as e.g. ``3 passed, 1 failed, 1 skipped``."""
    parts = [f"{summary.passed} passed", f"{summary.failed} failed"]
    if summary.skipped:
        parts.append(f"{summary.skipped} skipped")
    return ", ".join(parts)
