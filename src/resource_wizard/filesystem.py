"""File system access used by the resource collector and the wizard log."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable, Iterator, Protocol, Sequence

from pathspec import PathSpec

DEFAULT_IGNORE_PATTERNS: Sequence[str] = ("bin/", "obj/")


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool:
        ...

    def copy(self, source: Path, target: Path) -> None:
        ...

    def write_text(self, path: Path, text: str) -> None:
        ...

    def iter_files(self, directory: Path, pattern: str) -> Iterator[Path]:
        ...


def compile_ignore_patterns(
    patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS, ignore_file: Path | None = None
) -> PathSpec | None:
    """Build a gitignore-style spec from inline patterns and an optional file."""

    lines = [line for line in patterns if line]
    if ignore_file is not None and ignore_file.exists():
        lines.extend(ignore_file.read_text().splitlines())
    if not lines:
        return None
    return PathSpec.from_lines("gitwildmatch", lines)


def is_ignored(path: Path, spec: PathSpec | None, root: Path) -> bool:
    if spec is None:
        return False
    rel = path.relative_to(root)
    return spec.match_file(rel.as_posix())


class LocalFileSystem:
    """Operate on the real disk."""

    def __init__(self, ignore: PathSpec | None = None) -> None:
        self._ignore = ignore

    def exists(self, path: Path) -> bool:
        return path.exists()

    def copy(self, source: Path, target: Path) -> None:
        shutil.copyfile(source, target)

    def write_text(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def iter_files(self, directory: Path, pattern: str) -> Iterator[Path]:
        for path in sorted(directory.rglob(pattern)):
            if path.is_file() and not is_ignored(path, self._ignore, directory):
                yield path


__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "FileSystem",
    "LocalFileSystem",
    "compile_ignore_patterns",
    "is_ignored",
]
