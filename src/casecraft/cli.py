"""Command-line interface for Casecraft."""

import importlib
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from casecraft import __version__
from casecraft.config import RunnerSettings, create_example_config
from casecraft.core.exceptions import CasecraftError, ConfigurationError
from casecraft.core.models import ExecutionSummary
from casecraft.core.runner import Runner, TestName, TestPool
from casecraft.listeners.console import ConsoleListener
from casecraft.messaging.bus import Bus

console = Console()


def print_banner() -> None:
    """Print the Casecraft banner."""
    console.print(
        Panel.fit(
            "[bold blue]Casecraft[/bold blue] - convention-driven test runner",
            subtitle=f"v{__version__}",
        )
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def load_settings(config_path: Optional[str]) -> RunnerSettings:
    """Load settings from an explicit path, a discovered file, or defaults."""
    if config_path:
        return RunnerSettings.from_file(config_path)
    try:
        return RunnerSettings.find_and_load()
    except FileNotFoundError:
        return RunnerSettings()


@click.group()
@click.version_option(version=__version__, prog_name="casecraft")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: casecraft.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """Casecraft - convention-driven test execution.

    Discovers test classes in a module by its convention, runs them, and
    reports every case as it completes.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="casecraft.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new Casecraft configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    create_example_config(output_path)
    console.print(f"[green]Created configuration file:[/green] {output_path}")


@main.command()
@click.argument("module", required=False)
@click.option("--namespace", "-n", help="Only run classes in this module or package")
@click.option("--type", "-t", "type_name", help="Only run this class (and its nested classes)")
@click.option("--method", "-m", "method_name", help="Only run this method of --type")
@click.option(
    "--test",
    "tests",
    multiple=True,
    help="Run exactly this test, as module.Class::method (repeatable)",
)
@click.argument("custom_arguments", nargs=-1)
@click.pass_context
def run(
    ctx: click.Context,
    module: Optional[str],
    namespace: Optional[str],
    type_name: Optional[str],
    method_name: Optional[str],
    tests: tuple[str, ...],
    custom_arguments: tuple[str, ...],
) -> None:
    """Run the tests found in MODULE."""
    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    configure_logging(ctx.obj.get("verbose") or settings.verbose)

    module = module or settings.module
    if not module:
        console.print("[red]Error:[/red] No module given and none configured")
        sys.exit(2)

    if method_name and not type_name:
        console.print("[red]Error:[/red] --method requires --type")
        sys.exit(2)

    bus = Bus(ConsoleListener(console, show_output=settings.show_output))
    runner = Runner(
        bus,
        custom_arguments=custom_arguments or tuple(settings.custom_arguments),
        assertion_modules=settings.assertion_modules,
    )

    # Console scripts do not put the working directory on the import path.
    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))

    try:
        pool = TestPool.from_module(importlib.import_module(module))
        summary = _run_scope(runner, pool, namespace, type_name, method_name, tests)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)
    except ImportError as e:
        console.print(f"[red]Error importing {module}:[/red] {e}")
        sys.exit(2)
    except CasecraftError as e:
        console.print(f"[red]Run aborted:[/red] {e}")
        sys.exit(1)

    if summary.failed > 0:
        sys.exit(1)


def _run_scope(
    runner: Runner,
    pool: TestPool,
    namespace: Optional[str],
    type_name: Optional[str],
    method_name: Optional[str],
    tests: tuple[str, ...],
) -> ExecutionSummary:
    if tests:
        return runner.run_tests(pool, [TestName.parse(t) for t in tests])
    if type_name:
        try:
            cls = pool.find(type_name)
        except ConfigurationError:
            cls = pool.find(f"{pool.name}.{type_name}")
        if method_name:
            return runner.run_method(pool, cls, method_name)
        return runner.run_type(pool, cls)
    if namespace:
        return runner.run_namespace(pool, namespace)
    return runner.run_pool(pool)


if __name__ == "__main__":
    main()
