"""
CLI module - Command line interface for tasksync

Entry point for the `tsync` command using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import AppConfig, LoggingConfig, load_config
from .errors import ConfigError, TaskFileError
from .loader import SequenceDefinition, load_task_file, resolve_task_file
from .runners import SequenceCallbacks, SequenceResult, run_and_wait
from .tasks import TaskKind, TaskRecord, classify_descriptor, describe_callable, normalize_task

console = Console()
app = typer.Typer(
    name="tsync",
    help="tasksync - Run callback-style tasks one after another, stopping at the first failure.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"tsync version {__version__}")
        raise typer.Exit()


# Type aliases for common options
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file", exists=True, dir_okay=False),
]
TaskFileArgument = Annotated[str, typer.Argument(help="Task file path, or a task file name in tasks_dir")]


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """tasksync - Run callback-style tasks one after another, stopping at the first failure."""
    pass


def setup_logging(config: LoggingConfig) -> None:
    """Route package logs to the console through Rich."""
    logger = logging.getLogger("tasksync")
    logger.setLevel(config.level.upper())
    logger.handlers.clear()
    if config.console_logging:
        logger.addHandler(RichHandler(console=console, show_path=False))


def _load_settings(config_path: Path | None) -> AppConfig:
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    setup_logging(cfg.logging)
    return cfg


def _load_definition(task_file: str, config: AppConfig) -> SequenceDefinition:
    try:
        return load_task_file(resolve_task_file(task_file, config))
    except TaskFileError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def format_value(value: Any, max_width: int) -> str:
    """Shorten a value's repr for table display."""
    text = repr(value)
    if max_width > 3 and len(text) > max_width:
        text = text[: max_width - 3] + "..."
    return escape(text)


@app.command()
def run(
    task_file: TaskFileArgument,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only print errors")] = False,
    config: ConfigOption = None,
):
    """
    Run a task file - each task starts after the previous one succeeded.

    [bold]Examples:[/bold]

        tsync run release.yaml

        tsync run release            # looks up release.yaml in tasks_dir

        tsync run release.yaml -q
    """
    cfg = _load_settings(config)
    definition = _load_definition(task_file, cfg)

    def on_sequence_start(total: int):
        console.print(f"\n[bold]Running:[/bold] {definition.name} ({total} task(s))")
        if definition.description:
            console.print(f"  [dim]{definition.description}[/dim]")

    def on_task_start(index: int, record: TaskRecord):
        console.print(f"  [{index}] {describe_callable(record.callable)}...")

    def on_task_complete(index: int, error: Any):
        if error:
            console.print(f"  [red]✗[/red] [{index}] {escape(str(error))}")
        else:
            console.print(f"  [green]✓[/green] [{index}]")

    callbacks = None
    if not quiet:
        callbacks = SequenceCallbacks(
            on_sequence_start=on_sequence_start,
            on_task_start=on_task_start,
            on_task_complete=on_task_complete,
        )

    result = run_and_wait(definition.tasks, callbacks)

    if not quiet and cfg.output.show_results:
        _print_results(result, cfg.output.max_value_width)

    if not result.success:
        console.print(f"[red]Task {result.failed_index} failed:[/red] {escape(str(result.error))}")
        raise typer.Exit(1)

    if not quiet:
        console.print(f"[green]Done:[/green] {len(result.results)} task(s) completed")


def _print_results(result: SequenceResult, max_width: int) -> None:
    table = Table(title="Results")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Status")
    table.add_column("Value")

    for index, value in enumerate(result.results):
        if index < result.index:
            table.add_row(str(index), "[green]✓[/green]", format_value(value, max_width))
        elif index == result.index and not result.success:
            table.add_row(str(index), "[red]✗[/red]", "-")
        else:
            table.add_row(str(index), "[dim]not run[/dim]", "-")

    console.print()
    console.print(table)


@app.command()
def check(
    task_file: TaskFileArgument,
    config: ConfigOption = None,
):
    """
    Check a task file without running it.

    Lists every slot with its kind and fails if any slot is not runnable.
    """
    cfg = _load_settings(config)
    definition = _load_definition(task_file, cfg)

    table = Table(title=f"Tasks: {definition.name}")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Kind")
    table.add_column("Callable")
    table.add_column("Arguments")

    invalid: list[int] = []
    for index, descriptor in enumerate(definition.tasks):
        kind = classify_descriptor(descriptor)
        record = normalize_task(descriptor)
        if record is None:
            invalid.append(index)
            table.add_row(str(index), f"[red]{TaskKind.INVALID.value}[/red]", format_value(descriptor, 40), "-")
            continue
        table.add_row(
            str(index),
            kind.value,
            describe_callable(record.callable),
            format_value(record.arguments, cfg.output.max_value_width),
        )

    console.print(table)

    if not definition.tasks:
        console.print("[red]Error:[/red] No tasks defined")
        raise typer.Exit(1)

    if invalid:
        console.print(f"[red]Error:[/red] Not runnable: {', '.join(str(i) for i in invalid)}")
        raise typer.Exit(1)

    console.print(f"[green]OK:[/green] {len(definition.tasks)} task(s)")


if __name__ == "__main__":
    app()
