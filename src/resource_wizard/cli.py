"""Typer-based CLI for the language resource wizard."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from .config import Config, ConfigError, default_config, load_config, save_config
from .events import JobEvent, ProgressEvent
from .generator import GenerationFailure, create_wizard, run_generation
from .languages import UnknownLanguage, find_language
from .models import JobResult, Language
from .tree import DirectoryContainerSource, discover_containers
from .wizard import StepView, WizardSequencer, WizardState

app = typer.Typer(help="Generate language-specific copies of resource files in a solution.")
console = Console()


def _configure_logging(level: str, log_file: Path | None) -> None:
    logger.remove()
    logger.add(console.print, level=level)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


def _load(config: Optional[Path]) -> Config:
    try:
        return load_config(config)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=4)


def _language(code: str, config: Config) -> Language:
    try:
        return find_language(code, config.language_list())
    except UnknownLanguage as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=4)


def _print_summary(result: JobResult | None, log_path: Path) -> None:
    table = Table(title="Resource generation")
    table.add_column("Item")
    table.add_column("Count", justify="right")
    if result is not None:
        table.add_row("Projects", str(result.containers))
        table.add_row("Files generated", str(result.files_copied))
        table.add_row("Overwritten", str(result.overwrites))
        table.add_row("Added to projects", str(result.registered))
        table.add_row("Skipped project groups", str(result.skipped_subtrees))
        table.add_row("Copy failures", str(len(result.failures)))
    console.print(table)
    console.print(f"Log written to {log_path}")


@app.command()
def generate(
    solution: Path = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    language: str = typer.Option(..., "--language", "-l", help="Language code, e.g. fr"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to configuration YAML"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Folder for the wizard log"),
    register: Optional[bool] = typer.Option(
        None, "--register/--no-register", help="Add generated files to their projects"
    ),
    ignore_file: Optional[Path] = typer.Option(None, "--ignore-file", help="Extra ignore patterns"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    debug_log: Optional[Path] = typer.Option(None, "--debug-log", help="Write diagnostics to this file"),
) -> None:
    """Run the wizard non-interactively for SOLUTION."""

    _configure_logging(log_level.upper(), debug_log)
    settings = _load(config)
    target = _language(language, settings)

    columns = (TextColumn("{task.description}"), BarColumn(), TextColumn("{task.percentage:>3.0f}%"))
    with Progress(*columns, console=console) as progress:
        task = progress.add_task("Starting", total=100)

        def _on_event(event: JobEvent) -> None:
            if isinstance(event, ProgressEvent):
                progress.update(task, completed=event.percent, description=event.label.strip() or "Working")

        try:
            wizard = run_generation(
                solution,
                target,
                config=settings,
                destination=log_dir,
                register=register,
                ignore_file=ignore_file,
                on_event=_on_event,
            )
        except GenerationFailure as failure:
            console.print(f"[red]ERROR:[/red] {escape(str(failure))}")
            raise typer.Exit(code=3)

    _print_summary(wizard.result, wizard.log_path)
    if wizard.result and wizard.result.has_failures:
        for failure in wizard.result.failures:
            console.print(f"[yellow]WARNING:[/yellow] {failure.source}: {escape(failure.reason)}")
        raise typer.Exit(code=2)
    console.print("[green]Resource generation completed.[/green]")


def _show(view: StepView) -> None:
    body = view.content.rstrip()
    if view.show_checkbox:
        mark = "x" if view.checkbox_value else " "
        body += f"\n\n[{mark}] {view.checkbox_text}"
    console.print(Panel(escape(body), title=escape(view.title), subtitle=escape(view.description)))


def _drive(wizard: WizardSequencer) -> None:
    wizard.start()
    while not wizard.closed:
        view = wizard.view()
        _show(view)
        if wizard.state in (WizardState.COMPLETE, WizardState.FAILED):
            if wizard.failure:
                console.print(f"[red]{escape(wizard.failure)}[/red]")
            _print_summary(wizard.result, wizard.log_path)
            if typer.confirm("Open the log?", default=False):
                wizard.retreat()
            wizard.advance()
            break
        if view.show_checkbox:
            wizard.set_checkbox(typer.confirm(view.checkbox_text, default=view.checkbox_value))
        choices = "n" if not view.back_enabled else "n/b"
        answer = typer.prompt(f"{view.next_label} ({choices}/q)", default="n").strip().lower()
        if answer.startswith("q"):
            raise typer.Exit(code=1)
        if answer.startswith("b"):
            wizard.retreat()
            continue
        wizard.advance()
        if wizard.state == WizardState.PROCESSING:
            with console.status("Generating resources…") as status:
                while not wizard.wait(timeout=0.2):
                    if wizard.processing_text:
                        status.update(wizard.processing_text)


@app.command()
def wizard(
    solution: Path = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language code"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to configuration YAML"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """Step through the wizard interactively."""

    _configure_logging(log_level.upper(), None)
    settings = _load(config)
    if language is None:
        codes = ", ".join(lang.code for lang in settings.language_list())
        language = typer.prompt(f"Language ({codes})")
    _drive(create_wizard(solution, _language(language, settings), config=settings))


@app.command()
def projects(
    solution: Path = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to configuration YAML"),
) -> None:
    """List the projects that would be processed."""

    settings = _load(config)
    source = DirectoryContainerSource(solution, settings.resources.project_patterns)
    walk = discover_containers(source)
    table = Table(title=str(solution))
    table.add_column("Project")
    table.add_column("Path")
    for container in walk.containers:
        table.add_row(container.name, str(container.path))
    console.print(table)
    if walk.skipped:
        console.print(f"[yellow]Skipped {walk.skipped} unreadable project groups[/yellow]")


@app.command("languages")
def list_languages(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to configuration YAML"),
) -> None:
    """Show the configured languages."""

    table = Table()
    table.add_column("Code")
    table.add_column("Name")
    for language in _load(config).language_list():
        table.add_row(language.code, language.name)
    console.print(table)


@app.command("init-config")
def init_config(path: Path = typer.Argument(..., writable=True, resolve_path=True)) -> None:
    """Write the default configuration file to PATH."""

    save_config(default_config(), path)
    console.print(f"[green]Wrote configuration to {path}[/green]")


if __name__ == "__main__":
    app()
