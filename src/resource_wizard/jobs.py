"""Language resource generation job executed in the background."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from loguru import logger

from .collector import ResourceCollector
from .events import EventBus
from .models import JobResult, Settings
from .tree import DEFAULT_PROJECT_PATTERNS, ContainerSource, DirectoryContainerSource, discover_containers

SourceFactory = Callable[[Settings], ContainerSource]
REGISTER_OPTION = "register"


class Job(Protocol):
    def process(self, settings: Settings, bus: EventBus) -> JobResult:
        ...


def progress_increment(container_count: int) -> int:
    """Share of the progress bar earned by each finished container."""

    if container_count <= 0:
        return 0
    return 100 // container_count


class LanguageResourceJob:
    """Walk the solution and create language-qualified resource copies.

    Publishes progress and log events on the bus and finishes with exactly one
    completion event. Exceptions propagate to the runner, which reports them as
    a failed job.
    """

    def __init__(
        self,
        collector: Optional[ResourceCollector] = None,
        source_factory: Optional[SourceFactory] = None,
        *,
        project_patterns: Sequence[str] = DEFAULT_PROJECT_PATTERNS,
        register_default: bool = True,
    ) -> None:
        self.collector = collector or ResourceCollector()
        self.register_default = register_default
        self._source_factory = source_factory or (
            lambda settings: DirectoryContainerSource(settings.source_root, project_patterns)
        )

    def _log(self, bus: EventBus, text: str) -> None:
        bus.log(text)

    def _spacer(self, bus: EventBus, character: str = " ", length: int = 60) -> None:
        bus.log(character * length)

    def process(self, settings: Settings, bus: EventBus) -> JobResult:
        if settings.language is None:
            raise ValueError("A target language is required to generate resources")

        result = JobResult()
        progress = 0
        language = settings.language
        register = settings.option(REGISTER_OPTION, default=self.register_default)

        self._spacer(bus, "-")
        self._log(bus, "Begin language resource creation process")
        self._spacer(bus)
        bus.progress("Adding new language resources", progress)
        self._log(bus, f"Selected language: {language.code} ({language.name})")

        source = self._source_factory(settings)
        walk = discover_containers(source)
        result.skipped_subtrees = walk.skipped
        increment = progress_increment(len(walk.containers))
        logger.info("Processing {} projects for language {}", len(walk.containers), language.code)

        for container in walk.containers:
            bus.progress(container.name, progress)
            directory = source.directory(container)
            self._spacer(bus)
            self._log(bus, f"Project: {container.path.name}")
            self._log(bus, f"Path: {directory}")

            outcome = self.collector.collect(
                container,
                directory,
                language.code,
                on_progress=lambda label: bus.progress(label, progress),
                on_log=lambda line: self._log(bus, line),
                register=register,
            )
            outcome.merge_into(result)
            progress += increment

        if walk.skipped:
            self._spacer(bus)
            self._log(bus, f"Skipped {walk.skipped} unreadable project groups")
        if result.failures:
            self._spacer(bus)
            self._log(bus, f"{len(result.failures)} resource files could not be copied:")
            for failure in result.failures:
                self._log(bus, f"     {failure.source}: {failure.reason}")

        progress = 100
        bus.progress("Creation process completed", progress)
        self._log(bus, f"Creation process completed ({result.files_copied} files in {result.containers} projects)")
        self._spacer(bus)
        self._log(bus, "End language resource creation process")
        self._spacer(bus, "-")
        bus.complete(result)
        return result


__all__ = ["Job", "LanguageResourceJob", "progress_increment", "REGISTER_OPTION"]
