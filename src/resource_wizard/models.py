"""Shared models for wizard steps, job settings and the project tree."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple


@dataclass(slots=True)
class WizardStep:
    """A single page of the wizard.

    Only ``checkbox_value`` is expected to change once the registry is built.
    """

    title: str
    description: str
    content: str
    show_checkbox: bool = False
    checkbox_text: str = ""
    checkbox_value: bool = False
    key: str = ""


@dataclass(frozen=True, slots=True)
class Language:
    """Target language for generated resources."""

    code: str
    name: str

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


@dataclass(frozen=True, slots=True)
class Settings:
    """Snapshot handed from the sequencer to the background job."""

    steps: Tuple[WizardStep, ...]
    source_root: Path
    destination_root: Path
    language: Optional[Language] = None

    @classmethod
    def snapshot(
        cls,
        steps: Iterable[WizardStep],
        source_root: Path,
        destination_root: Path,
        language: Optional[Language] = None,
    ) -> "Settings":
        return cls(
            steps=tuple(replace(step) for step in steps),
            source_root=Path(source_root),
            destination_root=Path(destination_root),
            language=language,
        )

    def option(self, key: str, default: bool = False) -> bool:
        for step in self.steps:
            if step.key == key and step.show_checkbox:
                return step.checkbox_value
        return default


class ContainerKind(str, Enum):
    """Kind of node in the solution tree."""

    REGULAR = "regular"
    GROUP = "group"


@dataclass(frozen=True, slots=True)
class ContainerNode:
    """A project (regular) or a solution folder (group)."""

    name: str
    kind: ContainerKind
    path: Path
    children: Tuple["ContainerNode", ...] = ()

    @property
    def is_group(self) -> bool:
        return self.kind == ContainerKind.GROUP


@dataclass(frozen=True, slots=True)
class ResourceFile:
    """A resource file discovered while scanning a project directory."""

    base_name: str
    extension: str
    directory: Path
    path: Path

    @classmethod
    def from_path(cls, path: Path) -> "ResourceFile":
        return cls(
            base_name=path.name.split(".")[0],
            extension=path.suffix,
            directory=path.parent,
            path=path,
        )

    def localized_name(self, language_code: str) -> str:
        return resource_file_name(self.base_name, language_code, self.extension)


def resource_file_name(base_name: str, language_code: str, extension: str) -> str:
    """Build ``{base}.{code}{extension}``, e.g. ``Strings.de.resx``."""

    return f"{base_name}.{language_code}{extension}"


@dataclass(slots=True)
class CopyFailure:
    """A resource that could not be copied."""

    source: Path
    target: Path
    reason: str


@dataclass(slots=True)
class JobResult:
    """Counters collected while a job runs."""

    containers: int = 0
    files_copied: int = 0
    overwrites: int = 0
    registered: int = 0
    skipped_subtrees: int = 0
    generated: List[Path] = field(default_factory=list)
    failures: List[CopyFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


__all__ = [
    "WizardStep",
    "Language",
    "Settings",
    "ContainerKind",
    "ContainerNode",
    "ResourceFile",
    "resource_file_name",
    "CopyFailure",
    "JobResult",
]
