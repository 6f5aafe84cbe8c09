from __future__ import annotations

import threading
from pathlib import Path

import pytest

from conftest import group, regular
from resource_wizard.collector import ResourceCollector
from resource_wizard.events import CompletedEvent, EventBus, FailedEvent, ProgressEvent, is_terminal
from resource_wizard.jobs import LanguageResourceJob, progress_increment
from resource_wizard.models import JobResult, Language, Settings
from resource_wizard.runner import JobInProgressError, JobRunner, execute
from resource_wizard.tree import StaticContainerSource


def _settings(root: Path, language: Language | None = Language("de", "German")) -> Settings:
    return Settings(steps=(), source_root=root, destination_root=root, language=language)


def _job_for(tree) -> LanguageResourceJob:
    return LanguageResourceJob(source_factory=lambda settings: StaticContainerSource(tree))


def _events(bus: EventBus) -> list:
    return list(bus.drain())


@pytest.mark.parametrize("count, expected", [(0, 0), (1, 100), (3, 33), (7, 14), (200, 0)])
def test_progress_increment(count: int, expected: int) -> None:
    assert progress_increment(count) == expected


def test_progress_steps_per_project(tmp_path: Path) -> None:
    tree = [group("Folder", *(regular(name, root=tmp_path) for name in ("A", "B", "C")))]
    for name in ("A", "B", "C"):
        (tmp_path / name).mkdir()
    bus = EventBus()

    result = _job_for(tree).process(_settings(tmp_path), bus)

    progress = [(event.label, event.percent) for event in _events(bus) if isinstance(event, ProgressEvent)]
    assert progress == [
        ("Adding new language resources", 0),
        ("A", 0),
        ("B", 33),
        ("C", 66),
        ("Creation process completed", 100),
    ]
    assert result.containers == 3


def test_empty_solution_still_completes(tmp_path: Path) -> None:
    bus = EventBus()
    _job_for([]).process(_settings(tmp_path), bus)
    events = _events(bus)
    percents = [event.percent for event in events if isinstance(event, ProgressEvent)]
    assert percents == [0, 100]
    assert isinstance(events[-1], CompletedEvent)
    assert sum(1 for event in events if is_terminal(event)) == 1


def test_resources_copied_and_logged(solution_factory) -> None:
    root = solution_factory({"Core": ["MessagesResx.resx"], "Web": ["Views/LabelsResx.resx"]})
    bus = EventBus()

    result = LanguageResourceJob().process(_settings(root, Language("fr", "French")), bus)

    assert result.files_copied == 2
    assert (root / "Web" / "Views" / "LabelsResx.fr.resx").exists()
    lines = [event.line for event in _events(bus) if hasattr(event, "line")]
    assert lines[0] == "-" * 60
    assert lines[1] == "Begin language resource creation process"
    assert "Selected language: fr (French)" in lines
    assert "Project: Core.csproj" in lines
    assert lines[-1] == "-" * 60


def test_skipped_subtrees_are_reported(tmp_path: Path) -> None:
    class Broken(StaticContainerSource):
        def children(self, node):
            raise PermissionError("denied")

    bus = EventBus()
    job = LanguageResourceJob(source_factory=lambda settings: Broken([group("Locked")]))
    result = job.process(_settings(tmp_path), bus)

    assert result.skipped_subtrees == 1
    assert any("Skipped 1 unreadable project groups" in getattr(e, "line", "") for e in _events(bus))


def test_missing_language_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        _job_for([]).process(_settings(tmp_path, language=None), EventBus())


def test_execute_turns_exception_into_failure(tmp_path: Path) -> None:
    class Exploding:
        def process(self, settings, bus):
            bus.progress("Starting", 10)
            raise OSError("disk unplugged")

    bus = EventBus()
    execute(Exploding(), _settings(tmp_path), bus)
    events = _events(bus)
    assert isinstance(events[-1], FailedEvent)
    assert "disk unplugged" in events[-1].message
    assert bus.closed


def test_execute_fails_jobs_that_never_complete(tmp_path: Path) -> None:
    class Silent:
        def process(self, settings, bus):
            return JobResult()

    bus = EventBus()
    execute(Silent(), _settings(tmp_path), bus)
    assert isinstance(_events(bus)[-1], FailedEvent)


def test_bus_rejects_events_after_terminal() -> None:
    bus = EventBus()
    bus.complete(JobResult())
    with pytest.raises(RuntimeError):
        bus.log("late")
    assert len(_events(bus)) == 1


def test_runner_allows_one_job_at_a_time(tmp_path: Path) -> None:
    release = threading.Event()

    class Blocking:
        def process(self, settings, bus):
            release.wait(5)
            bus.complete(JobResult())

    runner = JobRunner(Blocking())
    bus = EventBus()
    runner.submit(_settings(tmp_path), bus)
    assert runner.busy
    with pytest.raises(JobInProgressError):
        runner.submit(_settings(tmp_path), EventBus())

    release.set()
    assert runner.wait(5)
    assert not runner.busy
    assert isinstance(_events(bus)[-1], CompletedEvent)


@pytest.mark.parametrize("register_default", [True, False])
def test_register_default_applies_without_options_step(solution_factory, register_default: bool) -> None:
    class Recording:
        def __init__(self) -> None:
            self.paths = []

        def register(self, container, path) -> bool:
            self.paths.append(path)
            return True

    root = solution_factory({"Core": ["MessagesResx.resx"]})
    registrar = Recording()
    job = LanguageResourceJob(ResourceCollector(registrar=registrar), register_default=register_default)

    result = job.process(_settings(root), EventBus())

    assert result.registered == (1 if register_default else 0)
    assert len(registrar.paths) == (1 if register_default else 0)
