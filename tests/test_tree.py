from __future__ import annotations

from pathlib import Path
from typing import Sequence

from conftest import group, regular
from resource_wizard.models import ContainerKind, ContainerNode
from resource_wizard.tree import (
    DirectoryContainerSource,
    StaticContainerSource,
    discover_containers,
    walk_containers,
)


class FaultySource(StaticContainerSource):
    """Raise when the children of one named group are listed."""

    def __init__(self, roots, broken: str) -> None:
        super().__init__(roots)
        self.broken = broken

    def children(self, node: ContainerNode) -> Sequence[ContainerNode]:
        if node.name == self.broken:
            raise PermissionError(f"cannot read {node.name}")
        return super().children(node)


def _names(nodes) -> list[str]:
    return [node.name for node in nodes]


def test_group_of_three_regulars() -> None:
    tree = [group("Folder", regular("A"), regular("B"), regular("C"))]
    result = walk_containers(tree, StaticContainerSource(tree))
    assert _names(result.containers) == ["A", "B", "C"]
    assert result.skipped == 0


def test_mixed_tree_is_depth_first_left_to_right() -> None:
    tree = [
        regular("One"),
        group("G1", regular("Two"), group("G2", regular("Three")), regular("Four")),
        group("Empty"),
        regular("Five"),
    ]
    result = walk_containers(tree, StaticContainerSource(tree))
    assert _names(result.containers) == ["One", "Two", "Three", "Four", "Five"]
    assert all(node.kind == ContainerKind.REGULAR for node in result.containers)


def test_failing_subtree_is_skipped() -> None:
    tree = [
        group("Good", regular("A")),
        group("Bad", regular("Hidden")),
        regular("B"),
    ]
    result = walk_containers(tree, FaultySource(tree, broken="Bad"))
    assert _names(result.containers) == ["A", "B"]
    assert result.skipped == 1


def test_deep_tree_does_not_recurse() -> None:
    node = regular("Leaf")
    for depth in range(5000):
        node = group(f"G{depth}", node)
    result = walk_containers([node], StaticContainerSource([node]))
    assert _names(result.containers) == ["Leaf"]


def test_discover_with_unreadable_roots() -> None:
    class NoRoots(StaticContainerSource):
        def roots(self):
            raise OSError("gone")

    result = discover_containers(NoRoots([]))
    assert result.containers == []
    assert result.skipped == 1


def test_directory_source_maps_projects_and_folders(solution_factory) -> None:
    root = solution_factory(
        {
            "Core": [],
            "Modules/Accounts": [],
            "Modules/Ledger": [],
        }
    )
    (root / "Modules" / "Ledger" / "bin").mkdir()
    (root / "Docs").mkdir()

    source = DirectoryContainerSource(root)
    result = discover_containers(source)

    assert _names(result.containers) == ["Core", "Accounts", "Ledger"]
    core = result.containers[0]
    assert core.path == root / "Core" / "Core.csproj"
    assert source.directory(core) == root / "Core"


def test_directory_source_unreadable_folder_keeps_siblings(monkeypatch, solution_factory) -> None:
    root = solution_factory({"A": [], "Locked/Inner": [], "Z": []})
    original_iterdir = Path.iterdir

    def _iterdir(self):
        if self.name == "Locked":
            raise PermissionError(f"access denied: {self}")
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", _iterdir)
    result = discover_containers(DirectoryContainerSource(root))

    assert _names(result.containers) == ["A", "Z"]
    assert result.skipped == 1


def test_directory_source_unreadable_nested_folder(monkeypatch, solution_factory) -> None:
    root = solution_factory({"Modules/Accounts": [], "Modules/Locked/Inner": [], "Modules/Ledger": []})
    original_iterdir = Path.iterdir

    def _iterdir(self):
        if self.name == "Locked":
            raise PermissionError(f"access denied: {self}")
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", _iterdir)
    result = discover_containers(DirectoryContainerSource(root))

    assert _names(result.containers) == ["Accounts", "Ledger"]
    assert result.skipped == 1


def test_directory_source_root_project(tmp_path: Path) -> None:
    (tmp_path / "Single.vbproj").write_text("<Project />")
    (tmp_path / "Nested").mkdir()
    source = DirectoryContainerSource(tmp_path)
    result = discover_containers(source)
    assert _names(result.containers) == ["Single"]
