"""Configuration loading and validation for the resource wizard."""

from __future__ import annotations

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .filesystem import DEFAULT_IGNORE_PATTERNS
from .languages import SUPPORTED_LANGUAGES
from .models import Language, WizardStep
from .tree import DEFAULT_PROJECT_PATTERNS

DEFAULT_LOG_FILE_NAME = "LanguageResourceLog.txt"


class WizardConfig(BaseModel):
    """Window title and log settings."""

    title: str = "Language Resource Wizard"
    log_file_name: str = DEFAULT_LOG_FILE_NAME

    @field_validator("log_file_name")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if not value or Path(value).name != value:
            raise ValueError("log_file_name must be a bare file name")
        return value


class ResourcesConfig(BaseModel):
    """Which files count as resources and how projects are recognised."""

    qualifier: str = "Resx"
    extension: str = ".resx"
    project_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_PROJECT_PATTERNS))
    ignore: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    register_files: bool = True

    @field_validator("extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip()
        if not value.lstrip("."):
            raise ValueError("Resource extension cannot be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("project_patterns")
    @classmethod
    def _require_patterns(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one project pattern is required")
        return value


class LanguageConfig(BaseModel):
    code: str
    name: str

    @field_validator("code")
    @classmethod
    def _non_empty_code(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Language code cannot be empty")
        return value

    def to_language(self) -> Language:
        return Language(self.code, self.name)


class StepConfig(BaseModel):
    """A custom wizard step; text fields may use Jinja2 placeholders."""

    title: str
    description: str = ""
    content: str = ""
    show_checkbox: bool = False
    checkbox_text: str = ""
    checkbox_value: bool = False
    key: str = ""

    def to_step(self) -> WizardStep:
        return WizardStep(**self.model_dump())


def _default_languages() -> List[LanguageConfig]:
    return [LanguageConfig(code=lang.code, name=lang.name) for lang in SUPPORTED_LANGUAGES]


class Config(BaseModel):
    """Top-level configuration."""

    wizard: WizardConfig = Field(default_factory=WizardConfig)
    resources: ResourcesConfig = Field(default_factory=ResourcesConfig)
    languages: List[LanguageConfig] = Field(default_factory=_default_languages)
    steps: List[StepConfig] = Field(default_factory=list)

    @field_validator("languages")
    @classmethod
    def _unique_languages(cls, value: List[LanguageConfig]) -> List[LanguageConfig]:
        if not value:
            raise ValueError("At least one language must be configured")
        seen: set[str] = set()
        for language in value:
            code = language.code.lower()
            if code in seen:
                raise ValueError(f"Duplicate language code '{language.code}'")
            seen.add(code)
        return value

    @field_validator("steps")
    @classmethod
    def _enough_steps(cls, value: List[StepConfig]) -> List[StepConfig]:
        if value and len(value) < 2:
            raise ValueError("A custom wizard needs at least two steps")
        return value

    def language_list(self) -> List[Language]:
        return [language.to_language() for language in self.languages]


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""


def default_config() -> Config:
    return Config()


def load_config(path: Path | None) -> Config:
    """Load configuration from a YAML file; ``None`` gives the defaults."""

    if path is None:
        return default_config()
    try:
        data = yaml.safe_load(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML: {exc}") from exc

    try:
        return Config.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def save_config(config: Config, path: Path) -> None:
    """Persist configuration to disk as YAML."""

    rendered = config.model_dump()
    path.write_text(yaml.safe_dump(rendered, sort_keys=False))


__all__ = [
    "Config",
    "ConfigError",
    "LanguageConfig",
    "ResourcesConfig",
    "StepConfig",
    "WizardConfig",
    "default_config",
    "load_config",
    "save_config",
]
