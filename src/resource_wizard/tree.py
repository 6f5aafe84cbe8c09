"""Solution tree sources and the best-effort container walk."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List, Protocol, Sequence, Tuple

from loguru import logger

from .models import ContainerKind, ContainerNode

DEFAULT_PROJECT_PATTERNS: Tuple[str, ...] = ("*.csproj", "*.vbproj")


class ContainerSource(Protocol):
    """Read-only access to a solution tree."""

    def roots(self) -> Sequence[ContainerNode]:
        ...

    def children(self, node: ContainerNode) -> Sequence[ContainerNode]:
        ...

    def directory(self, node: ContainerNode) -> Path:
        ...


class StaticContainerSource:
    """Serve an in-memory tree of :class:`ContainerNode` objects."""

    def __init__(self, roots: Iterable[ContainerNode]) -> None:
        self._roots = tuple(roots)

    def roots(self) -> Sequence[ContainerNode]:
        return self._roots

    def children(self, node: ContainerNode) -> Sequence[ContainerNode]:
        return node.children

    def directory(self, node: ContainerNode) -> Path:
        return node.path.parent if node.path.suffix else node.path


class DirectoryContainerSource:
    """Treat a solution directory on disk as a container tree.

    A directory that holds a project file is a regular container whose path is
    the project file. Any other directory, including one that cannot be read,
    is a group container. Children are listed lazily, so an unreadable folder
    surfaces as an enumeration fault of its own and not of its parent.
    """

    def __init__(
        self,
        root: Path,
        project_patterns: Sequence[str] = DEFAULT_PROJECT_PATTERNS,
        ignore_names: Sequence[str] = ("bin", "obj", ".git", ".vs", "packages", "node_modules"),
    ) -> None:
        self.root = Path(root)
        self._patterns = tuple(project_patterns)
        self._ignore = set(ignore_names)

    def _project_file(self, directory: Path) -> Path | None:
        for entry in sorted(directory.iterdir()):
            if entry.is_file() and any(fnmatch(entry.name, pattern) for pattern in self._patterns):
                return entry
        return None

    def _node_for(self, directory: Path) -> ContainerNode:
        try:
            project = self._project_file(directory)
        except OSError as exc:
            # Listing it again from the walk fails too and counts it as skipped.
            logger.debug("Unable to inspect {}: {}", directory, exc)
            return ContainerNode(directory.name, ContainerKind.GROUP, directory)
        if project is not None:
            return ContainerNode(project.stem, ContainerKind.REGULAR, project)
        return ContainerNode(directory.name, ContainerKind.GROUP, directory)

    def _subdirectories(self, directory: Path) -> List[Path]:
        return [
            entry
            for entry in sorted(directory.iterdir())
            if entry.is_dir() and entry.name not in self._ignore
        ]

    def roots(self) -> Sequence[ContainerNode]:
        project = self._project_file(self.root)
        if project is not None:
            return [ContainerNode(project.stem, ContainerKind.REGULAR, project)]
        return [self._node_for(directory) for directory in self._subdirectories(self.root)]

    def children(self, node: ContainerNode) -> Sequence[ContainerNode]:
        if not node.is_group:
            return ()
        return [self._node_for(directory) for directory in self._subdirectories(node.path)]

    def directory(self, node: ContainerNode) -> Path:
        return node.path.parent if node.kind == ContainerKind.REGULAR else node.path


@dataclass(slots=True)
class WalkResult:
    containers: List[ContainerNode]
    skipped: int = 0


def walk_containers(roots: Iterable[ContainerNode], source: ContainerSource) -> WalkResult:
    """Flatten ``roots`` into regular containers, depth first, left to right.

    Listing the children of a group is best effort: a failure there counts the
    group as skipped and contributes no children, and the walk carries on with
    the remaining siblings.
    """

    result = WalkResult(containers=[])
    stack: List[ContainerNode] = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        if node is None:
            continue
        if not node.is_group:
            result.containers.append(node)
            continue
        try:
            children = list(source.children(node))
        except Exception as exc:
            result.skipped += 1
            logger.debug("Unable to enumerate {}: {}", node.name, exc)
            continue
        stack.extend(reversed(children))
    return result


def discover_containers(source: ContainerSource) -> WalkResult:
    """Walk every root of ``source``; failing to list the roots yields nothing."""

    try:
        roots = list(source.roots())
    except Exception as exc:
        logger.debug("Unable to enumerate solution roots: {}", exc)
        return WalkResult(containers=[], skipped=1)
    return walk_containers(roots, source)


__all__ = [
    "DEFAULT_PROJECT_PATTERNS",
    "ContainerSource",
    "StaticContainerSource",
    "DirectoryContainerSource",
    "WalkResult",
    "walk_containers",
    "discover_containers",
]
