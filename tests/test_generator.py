from __future__ import annotations

from pathlib import Path

from conftest import LEGACY_PROJECT
from resource_wizard.config import StepConfig, default_config
from resource_wizard.events import CompletedEvent, ProgressEvent
from resource_wizard.generator import create_wizard, run_generation
from resource_wizard.models import Language
from resource_wizard.runner import JobRunner
from resource_wizard.wizard import WizardState


def test_run_generation_end_to_end(solution_factory, french: Language) -> None:
    root = solution_factory({"Core": ["MessagesResx.resx"], "Apps/Web": ["LabelsResx.resx", "bin/OldResx.resx"]})
    events = []

    wizard = run_generation(root, french, on_event=events.append, timeout=10)

    assert wizard.state == WizardState.COMPLETE
    assert wizard.progress == 100
    assert wizard.result.files_copied == 2
    assert (root / "Core" / "MessagesResx.fr.resx").read_text() == "<root>MessagesResx.resx</root>"
    assert not (root / "Apps" / "Web" / "bin" / "OldResx.fr.resx").exists()
    log_text = (root / "LanguageResourceLog.txt").read_text()
    assert "Begin language resource creation process" in log_text
    assert "Project: Web.csproj" in log_text
    assert any(isinstance(event, ProgressEvent) for event in events)
    assert isinstance(events[-1], CompletedEvent)


def test_register_option_updates_legacy_projects(solution_factory, french: Language) -> None:
    root = solution_factory({"Core": ["Resources/MessagesResx.resx"]}, project_text=LEGACY_PROJECT)

    wizard = run_generation(root, french, register=True, timeout=10)

    assert wizard.result.registered == 1
    assert "MessagesResx.fr.resx" in (root / "Core" / "Core.csproj").read_text(encoding="utf-8")


def test_no_register_leaves_projects_untouched(solution_factory, french: Language) -> None:
    root = solution_factory({"Core": ["Resources/MessagesResx.resx"]}, project_text=LEGACY_PROJECT)

    wizard = run_generation(root, french, register=False, timeout=10)

    assert wizard.result.files_copied == 1
    assert wizard.result.registered == 0
    assert (root / "Core" / "Core.csproj").read_text() == LEGACY_PROJECT


def test_log_goes_to_destination(solution_factory, french: Language, tmp_path: Path) -> None:
    root = solution_factory({"Core": ["MessagesResx.resx"]})
    logs = tmp_path / "logs"

    wizard = run_generation(root, french, destination=logs, timeout=10)

    assert wizard.log_path == logs / "LanguageResourceLog.txt"
    assert wizard.log_path.exists()
    assert not (root / "LanguageResourceLog.txt").exists()


def test_create_wizard_uses_configured_log_name(tmp_path: Path, french: Language) -> None:
    config = default_config()
    config.wizard.log_file_name = "resources.log"
    wizard = create_wizard(tmp_path, french, config=config)
    assert wizard.log_path == tmp_path / "resources.log"
    assert isinstance(wizard._runner, JobRunner)
    assert len(wizard.steps) == 4


def _custom_step_config(register_files: bool):
    config = default_config()
    config.resources.register_files = register_files
    config.steps = [
        StepConfig(title="Welcome"),
        StepConfig(title="Generate {{ language.name }}"),
        StepConfig(title="Done"),
    ]
    return config


def test_custom_steps_respect_register_setting(solution_factory, french: Language) -> None:
    root = solution_factory({"Core": ["Resources/MessagesResx.resx"]}, project_text=LEGACY_PROJECT)

    wizard = run_generation(root, french, config=_custom_step_config(False), timeout=10)

    assert wizard.result.files_copied == 1
    assert wizard.result.registered == 0
    assert (root / "Core" / "Core.csproj").read_text() == LEGACY_PROJECT


def test_custom_steps_register_when_enabled(solution_factory, french: Language) -> None:
    root = solution_factory({"Core": ["Resources/MessagesResx.resx"]}, project_text=LEGACY_PROJECT)
    config = _custom_step_config(False)

    wizard = run_generation(root, french, config=config, register=True, timeout=10)

    assert wizard.result.registered == 1
    assert config.resources.register_files is False
