"""Wizard step registries and their rendered content."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from jinja2 import BaseLoader, Environment, StrictUndefined

from .config import Config, default_config
from .jobs import REGISTER_OPTION
from .models import Language, WizardStep


class WizardError(Exception):
    """Base class for wizard errors."""


class InvalidStepRegistry(WizardError, ValueError):
    """Raised when a wizard cannot be built from the given steps."""


class StepRegistry(Sequence[WizardStep]):
    """Ordered, fixed collection of wizard steps.

    The second to last step confirms the run and the last one shows the
    outcome, so at least two steps are required.
    """

    def __init__(self, steps: Iterable[WizardStep]) -> None:
        self._steps: tuple[WizardStep, ...] = tuple(steps)
        if len(self._steps) < 2:
            raise InvalidStepRegistry(
                f"A wizard needs at least two steps, got {len(self._steps)}"
            )

    def __getitem__(self, index):  # type: ignore[override]
        return self._steps[index]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[WizardStep]:
        return iter(self._steps)

    @property
    def confirmation_index(self) -> int:
        return len(self._steps) - 2

    @property
    def terminal_index(self) -> int:
        return len(self._steps) - 1


_ENVIRONMENT = Environment(
    loader=BaseLoader(), autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True
)

WELCOME_TEMPLATE = """\
The following steps will be performed:

{% for title in titles %}Step {{ loop.index }}. {{ title }}
{% endfor %}
Ensure the solution is backed up before proceeding.
"""

OPTIONS_CONTENT = """\
New resource files are created next to every *{{ config.resources.qualifier }}{{ config.resources.extension }} \
file in the solution, named after the original with the language code inserted \
before the extension (for example Messages{{ config.resources.qualifier }}.{{ language.code }}{{ config.resources.extension }}).
"""

CONFIRMATION_CONTENT = """\
Click Generate to create the {{ language.name }} resource files.

Existing files with the same name are overwritten.
"""

COMPLETE_CONTENT = """\
The {{ language.name }} resource files have been created.

Click Show Log to review what was generated, then rebuild the solution.
"""


def render_text(template: str, context: Dict[str, Any]) -> str:
    return _ENVIRONMENT.from_string(template).render(**context)


def _context(language: Language, config: Config, titles: List[str]) -> Dict[str, Any]:
    return {"language": language, "config": config, "titles": titles}


def build_language_steps(language: Language, config: Optional[Config] = None) -> StepRegistry:
    """Build the steps of the language resource wizard."""

    config = config or default_config()
    if config.steps:
        return build_custom_steps(language, config)

    titles = ["Options", "Generate resources", "Review"]
    context = _context(language, config, titles)
    steps = [
        WizardStep(
            title="Language Resources",
            description=f"Create {language.name} resources from the existing resource files",
            content=render_text(WELCOME_TEMPLATE, context),
        ),
        WizardStep(
            title="Options",
            description="Choose how generated files are handled",
            content=render_text(OPTIONS_CONTENT, context),
            show_checkbox=True,
            checkbox_text="Add generated files to their projects",
            checkbox_value=config.resources.register_files,
            key=REGISTER_OPTION,
        ),
        WizardStep(
            title="Generate resources",
            description="Confirm generation",
            content=render_text(CONFIRMATION_CONTENT, context),
        ),
        WizardStep(
            title="Review",
            description="Generation complete",
            content=render_text(COMPLETE_CONTENT, context),
        ),
    ]
    return StepRegistry(steps)


def build_custom_steps(language: Language, config: Config) -> StepRegistry:
    """Render the steps declared in the configuration file."""

    titles = [step.title for step in config.steps[1:]]
    context = _context(language, config, titles)
    steps = []
    for step_config in config.steps:
        step = step_config.to_step()
        step.title = render_text(step.title, context)
        step.description = render_text(step.description, context)
        step.content = render_text(step.content, context)
        steps.append(step)
    return StepRegistry(steps)


__all__ = [
    "WizardError",
    "InvalidStepRegistry",
    "StepRegistry",
    "build_language_steps",
    "build_custom_steps",
    "render_text",
]
