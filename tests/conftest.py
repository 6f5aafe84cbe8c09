from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

import pytest

from resource_wizard.events import EventBus
from resource_wizard.models import ContainerKind, ContainerNode, Language, Settings, WizardStep

LEGACY_PROJECT = """<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <ItemGroup>
    <Compile Include="Program.cs" />
  </ItemGroup>
  <ItemGroup>
    <EmbeddedResource Include="Resources\\MessagesResx.resx" />
  </ItemGroup>
</Project>
"""

SDK_PROJECT = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>
</Project>
"""


class StubRunner:
    """Records submissions; the test publishes events on the captured bus."""

    def __init__(self) -> None:
        self.submissions: List[Settings] = []
        self.bus: Optional[EventBus] = None

    def submit(self, settings: Settings, bus: EventBus) -> None:
        self.submissions.append(settings)
        self.bus = bus


def regular(name: str, root: Path = Path("/solution")) -> ContainerNode:
    return ContainerNode(name, ContainerKind.REGULAR, root / name / f"{name}.csproj")


def group(name: str, *children: ContainerNode, root: Path = Path("/solution")) -> ContainerNode:
    return ContainerNode(name, ContainerKind.GROUP, root / name, tuple(children))


def make_steps(count: int) -> List[WizardStep]:
    return [
        WizardStep(title=f"Title {index}", description=f"Description {index}", content=f"Content {index}")
        for index in range(count)
    ]


@pytest.fixture()
def french() -> Language:
    return Language("fr", "French")


@pytest.fixture()
def stub_runner() -> StubRunner:
    return StubRunner()


@pytest.fixture()
def solution_factory(tmp_path: Path) -> Callable[..., Path]:
    """Create a solution folder with projects holding resource files."""

    def _factory(layout: dict[str, list[str]], *, project_text: str = SDK_PROJECT) -> Path:
        root = tmp_path / "solution"
        root.mkdir(exist_ok=True)
        for project_dir, resources in layout.items():
            directory = root / project_dir
            directory.mkdir(parents=True, exist_ok=True)
            name = Path(project_dir).name
            (directory / f"{name}.csproj").write_text(project_text)
            for resource in resources:
                path = directory / resource
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(f"<root>{resource}</root>")
        return root

    return _factory
