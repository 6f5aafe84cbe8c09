"""Copy resource files into language-qualified variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from .filesystem import FileSystem, LocalFileSystem
from .models import ContainerNode, CopyFailure, JobResult, ResourceFile
from .registration import NullRegistrar, ProjectRegistrar

DEFAULT_QUALIFIER = "Resx"
DEFAULT_EXTENSION = ".resx"
PADDING = " " * 10

ProgressCallback = Callable[[str], None]
LogCallback = Callable[[str], None]


def resource_pattern(qualifier: str = DEFAULT_QUALIFIER, extension: str = DEFAULT_EXTENSION) -> str:
    return f"*{qualifier}{extension}"


@dataclass(slots=True)
class ContainerOutcome:
    """What happened to a single project's resources."""

    container: ContainerNode
    directory: Path
    copied: List[Path] = field(default_factory=list)
    overwrites: int = 0
    registered: int = 0
    failures: List[CopyFailure] = field(default_factory=list)

    def merge_into(self, result: JobResult) -> None:
        result.containers += 1
        result.files_copied += len(self.copied)
        result.generated.extend(self.copied)
        result.overwrites += self.overwrites
        result.registered += self.registered
        result.failures.extend(self.failures)


class ResourceCollector:
    """Scan a project directory and write ``{base}.{code}{ext}`` copies."""

    def __init__(
        self,
        file_system: Optional[FileSystem] = None,
        registrar: Optional[ProjectRegistrar] = None,
        *,
        qualifier: str = DEFAULT_QUALIFIER,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.file_system = file_system or LocalFileSystem()
        self.registrar = registrar or NullRegistrar()
        self.pattern = resource_pattern(qualifier, extension)

    def find_resources(self, directory: Path) -> List[ResourceFile]:
        return [ResourceFile.from_path(path) for path in self.file_system.iter_files(directory, self.pattern)]

    def collect(
        self,
        container: ContainerNode,
        directory: Path,
        language_code: str,
        *,
        on_progress: ProgressCallback,
        on_log: LogCallback,
        register: bool = True,
    ) -> ContainerOutcome:
        outcome = ContainerOutcome(container=container, directory=directory)
        for resource in self.find_resources(directory):
            new_name = resource.localized_name(language_code)
            on_progress(f"     {new_name}")
            target = resource.directory / new_name

            if self.file_system.exists(target):
                outcome.overwrites += 1
                on_log(f"{PADDING}File already exists, overwriting: {new_name}")

            try:
                self.file_system.copy(resource.path, target)
            except OSError as exc:
                logger.warning("Copy of {} failed: {}", resource.path, exc)
                outcome.failures.append(CopyFailure(resource.path, target, str(exc)))
                on_log(f"{PADDING}Unable to copy {resource.path.name} to {new_name}: {exc}")
                continue
            outcome.copied.append(target)
            on_log(f"{PADDING}Copying {resource.path.name} to {new_name}")

            if register and self._register(container, target):
                outcome.registered += 1
                on_log(f"{PADDING}Adding {new_name} to the project")
        return outcome

    def _register(self, container: ContainerNode, target: Path) -> bool:
        try:
            return self.registrar.register(container, target)
        except Exception as exc:
            logger.warning("Registration of {} with {} skipped: {}", target.name, container.name, exc)
            return False


__all__ = [
    "DEFAULT_QUALIFIER",
    "DEFAULT_EXTENSION",
    "ContainerOutcome",
    "ResourceCollector",
    "resource_pattern",
]
