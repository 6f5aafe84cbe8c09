"""High level routines that assemble and drive a language resource wizard."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .collector import ResourceCollector
from .config import Config, default_config
from .events import JobEvent
from .filesystem import LocalFileSystem, compile_ignore_patterns
from .jobs import REGISTER_OPTION, LanguageResourceJob
from .models import JobResult, Language
from .registration import ProjectFileRegistrar
from .runner import JobRunner
from .steps import build_language_steps
from .wizard import Runner, WizardSequencer, WizardState


class GenerationFailure(Exception):
    """Raised when a non-interactive run ends with a failed job."""

    def __init__(self, message: str, result: Optional[JobResult] = None) -> None:
        super().__init__(message)
        self.result = result


def build_job(config: Config, *, ignore_file: Path | None = None) -> LanguageResourceJob:
    """Create the job.

    The options step decides whether files get registered; without one the
    ``register_files`` setting does.
    """

    resources = config.resources
    file_system = LocalFileSystem(compile_ignore_patterns(resources.ignore, ignore_file))
    collector = ResourceCollector(
        file_system,
        ProjectFileRegistrar(),
        qualifier=resources.qualifier,
        extension=resources.extension,
    )
    return LanguageResourceJob(
        collector,
        project_patterns=resources.project_patterns,
        register_default=resources.register_files,
    )


def create_wizard(
    solution: Path,
    language: Language,
    *,
    config: Optional[Config] = None,
    destination: Optional[Path] = None,
    runner: Optional[Runner] = None,
    ignore_file: Path | None = None,
    on_event: Optional[Callable[[JobEvent], None]] = None,
    open_log: Optional[Callable[[str], object]] = None,
) -> WizardSequencer:
    """Build a sequencer for ``solution`` with the configured steps."""

    config = config or default_config()
    steps = build_language_steps(language, config)
    return WizardSequencer(
        steps,
        source_root=solution,
        destination_root=destination or solution,
        runner=runner or JobRunner(build_job(config, ignore_file=ignore_file)),
        language=language,
        log_file_name=config.wizard.log_file_name,
        on_event=on_event,
        open_log=open_log,
    )


def run_generation(
    solution: Path,
    language: Language,
    *,
    config: Optional[Config] = None,
    destination: Optional[Path] = None,
    register: Optional[bool] = None,
    ignore_file: Path | None = None,
    on_event: Optional[Callable[[JobEvent], None]] = None,
    timeout: Optional[float] = None,
) -> WizardSequencer:
    """Walk the wizard from the first step to the end without user input."""

    config = config or default_config()
    if register is not None:
        config = config.model_copy(deep=True)
        config.resources.register_files = register
    wizard = create_wizard(
        solution,
        language,
        config=config,
        destination=destination,
        ignore_file=ignore_file,
        on_event=on_event,
    )
    wizard.start()
    while wizard.state != WizardState.PROCESSING:
        step = wizard.current_step
        if register is not None and step is not None and step.key == REGISTER_OPTION:
            wizard.set_checkbox(register)
        wizard.advance()
    if not wizard.wait(timeout):
        raise GenerationFailure("Timed out waiting for resource generation")
    if wizard.state == WizardState.FAILED:
        raise GenerationFailure(wizard.failure or "Resource generation failed", wizard.result)
    logger.info("Generated {} resource files", wizard.result.files_copied if wizard.result else 0)
    return wizard


__all__ = ["GenerationFailure", "build_job", "create_wizard", "run_generation"]
