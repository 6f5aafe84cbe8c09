from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from resource_wizard import cli
from resource_wizard.config import load_config
from resource_wizard.generator import GenerationFailure

runner = CliRunner()


def test_generate_creates_resources(solution_factory) -> None:
    root = solution_factory({"Core": ["MessagesResx.resx"]})

    result = runner.invoke(cli.app, ["generate", str(root), "--language", "es"])

    assert result.exit_code == 0, result.output
    assert (root / "Core" / "MessagesResx.es.resx").exists()
    assert (root / "LanguageResourceLog.txt").exists()
    assert "Resource generation completed" in result.output


def test_generate_unknown_language(solution_factory) -> None:
    root = solution_factory({"Core": []})
    result = runner.invoke(cli.app, ["generate", str(root), "--language", "xx"])
    assert result.exit_code == 4
    assert "Unknown language" in result.output


def test_generate_bad_config(solution_factory, tmp_path: Path) -> None:
    root = solution_factory({"Core": []})
    config = tmp_path / "bad.yml"
    config.write_text("languages: []\n")
    result = runner.invoke(cli.app, ["generate", str(root), "-l", "fr", "--config", str(config)])
    assert result.exit_code == 4


def test_generate_failed_job(monkeypatch, solution_factory) -> None:
    root = solution_factory({"Core": []})

    def _fail(*args, **kwargs):
        raise GenerationFailure("Job failed: boom")

    monkeypatch.setattr(cli, "run_generation", _fail)
    result = runner.invoke(cli.app, ["generate", str(root), "-l", "fr"])
    assert result.exit_code == 3
    assert "boom" in result.output


def test_projects_lists_containers(solution_factory) -> None:
    root = solution_factory({"Core": [], "Modules/Ledger": []})
    result = runner.invoke(cli.app, ["projects", str(root)])
    assert result.exit_code == 0, result.output
    assert "Core" in result.output
    assert "Ledger" in result.output


def test_languages_command() -> None:
    result = runner.invoke(cli.app, ["languages"])
    assert result.exit_code == 0
    assert "French" in result.output


def test_init_config_writes_defaults(tmp_path: Path) -> None:
    path = tmp_path / "wizard.yml"
    result = runner.invoke(cli.app, ["init-config", str(path)])
    assert result.exit_code == 0, result.output
    assert load_config(path).resources.qualifier == "Resx"


def test_interactive_wizard(solution_factory) -> None:
    root = solution_factory({"Core": ["MessagesResx.resx"]})
    answers = "\n".join(["n", "n", "n", "n", "n"]) + "\n"

    result = runner.invoke(cli.app, ["wizard", str(root), "-l", "fr"], input=answers)

    assert result.exit_code == 0, result.output
    assert (root / "Core" / "MessagesResx.fr.resx").exists()
    assert "Step 3 - Review" in result.output
