"""Step sequencing for the wizard and hand-off to the background job."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

import typer
from loguru import logger

from .config import DEFAULT_LOG_FILE_NAME
from .events import (
    CompletedEvent,
    EventBus,
    FailedEvent,
    JobEvent,
    LogAccumulator,
    LogEvent,
    ProgressEvent,
)
from .filesystem import FileSystem, LocalFileSystem
from .models import JobResult, Language, Settings, WizardStep
from .steps import StepRegistry, WizardError


class WizardState(str, Enum):
    NOT_STARTED = "not_started"
    ON_STEP = "on_step"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


FINISHED_STATES = (WizardState.COMPLETE, WizardState.FAILED)


class Runner(Protocol):
    def submit(self, settings: Settings, bus: EventBus) -> None:
        ...


@dataclass(frozen=True, slots=True)
class StepView:
    """Everything a front end needs to draw the current step."""

    index: int
    title: str
    description: str
    content: str
    show_checkbox: bool
    checkbox_text: str
    checkbox_value: bool
    back_label: str
    next_label: str
    back_enabled: bool
    next_enabled: bool


class WizardSequencer:
    """State machine behind the Back/Next buttons.

    Advancing past the confirmation step (the second to last one) submits a
    single job. Events from that job are consumed through :meth:`dispatch`,
    :meth:`pump` or :meth:`wait`; the terminal event moves the wizard onto the
    last step and writes the collected log into ``destination_root``.
    """

    def __init__(
        self,
        steps: Iterable[WizardStep],
        *,
        source_root: Path,
        destination_root: Path,
        runner: Runner,
        language: Optional[Language] = None,
        log_file_name: str = DEFAULT_LOG_FILE_NAME,
        file_system: Optional[FileSystem] = None,
        open_log: Optional[Callable[[str], object]] = None,
        on_event: Optional[Callable[[JobEvent], None]] = None,
    ) -> None:
        self.steps = steps if isinstance(steps, StepRegistry) else StepRegistry(steps)
        self.source_root = Path(source_root)
        self.destination_root = Path(destination_root)
        self.language = language
        self.log_file_name = log_file_name
        self.log = LogAccumulator()
        self.progress = 0
        self.progress_label = ""
        self.result: Optional[JobResult] = None
        self.failure: Optional[str] = None
        self.log_error: Optional[str] = None
        self.closed = False

        self._runner = runner
        self._file_system = file_system or LocalFileSystem()
        self._open_log = open_log or typer.launch
        self._on_event = on_event
        self._index = -1
        self._processing = False
        self._outcome: Optional[WizardState] = None
        self._bus: Optional[EventBus] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def index(self) -> int:
        return self._index

    @property
    def state(self) -> WizardState:
        if self._processing:
            return WizardState.PROCESSING
        if self._outcome is not None:
            return self._outcome
        if self._index < 0:
            return WizardState.NOT_STARTED
        if self._index == self.steps.confirmation_index:
            return WizardState.AWAITING_CONFIRMATION
        return WizardState.ON_STEP

    @property
    def current_step(self) -> Optional[WizardStep]:
        if self._index < 0:
            return None
        return self.steps[self._index]

    @property
    def log_path(self) -> Path:
        return self.destination_root / self.log_file_name

    @property
    def processing_text(self) -> str:
        if not self._processing or not self.progress_label:
            return ""
        return f"Processing {self.progress_label.strip()}..."

    def current_view(self) -> Optional[StepView]:
        if self._index < 0:
            return None
        return self.view()

    def view(self) -> StepView:
        """Display data for the current step; the wizard must have been started."""

        step = self.current_step
        if step is None:
            raise WizardError("The wizard has not been started")
        state = self.state
        prefix = "" if self._index == 0 else f"Step {self._index} - "
        finished = state in FINISHED_STATES
        if finished:
            next_label = "Finish"
        elif self._index == self.steps.confirmation_index:
            next_label = "Generate"
        else:
            next_label = "Next"
        return StepView(
            index=self._index,
            title=prefix + step.title,
            description=step.description,
            content=step.content,
            show_checkbox=step.show_checkbox,
            checkbox_text=step.checkbox_text,
            checkbox_value=step.checkbox_value,
            back_label="Show Log" if finished else "Back",
            next_label=next_label,
            back_enabled=state != WizardState.PROCESSING and self._index > 0,
            next_enabled=state != WizardState.PROCESSING,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def start(self) -> StepView:
        """Show the first step."""

        if self.state != WizardState.NOT_STARTED:
            raise WizardError("The wizard has already been started")
        self.advance()
        return self.view()

    def advance(self) -> bool:
        """Handle the Next button; return ``False`` when the call is ignored."""

        state = self.state
        if state == WizardState.PROCESSING:
            logger.debug("Ignoring advance while processing")
            return False
        if state in FINISHED_STATES:
            self.closed = True
            return True
        if state == WizardState.AWAITING_CONFIRMATION:
            self._submit()
            return True
        self._index += 1
        return True

    def retreat(self) -> bool:
        """Handle the Back button; on the last step it opens the log instead."""

        state = self.state
        if state in (WizardState.PROCESSING, WizardState.NOT_STARTED):
            return False
        if state in FINISHED_STATES:
            if self.log.flushed_to is None:
                return False
            self._open_log(str(self.log.flushed_to))
            return True
        if self._index == 0:
            return False
        self._index -= 1
        return True

    def set_checkbox(self, value: bool) -> bool:
        if self.state not in (WizardState.ON_STEP, WizardState.AWAITING_CONFIRMATION):
            return False
        step = self.steps[self._index]
        step.checkbox_value = bool(value)
        return True

    # ------------------------------------------------------------------
    # Job hand-off
    # ------------------------------------------------------------------
    def _submit(self) -> None:
        settings = Settings.snapshot(self.steps, self.source_root, self.destination_root, self.language)
        bus = EventBus()
        self._bus = bus
        self._processing = True
        self.progress = 0
        self.progress_label = ""
        logger.info("Submitting job for {}", self.source_root)
        try:
            self._runner.submit(settings, bus)
        except Exception:
            self._processing = False
            self._bus = None
            raise

    def dispatch(self, event: JobEvent) -> None:
        """Apply a single job event."""

        if not self._processing:
            logger.warning("Ignoring {} received outside of processing", type(event).__name__)
            return
        if isinstance(event, ProgressEvent):
            self.progress = event.percent
            self.progress_label = event.label
        elif isinstance(event, LogEvent):
            self.log.append(event.line)
        elif isinstance(event, CompletedEvent):
            self.result = event.result
            self._finish(WizardState.COMPLETE)
        elif isinstance(event, FailedEvent):
            self.result = event.result
            self.failure = event.message
            self.log.append(event.message)
            self._finish(WizardState.FAILED)
        if self._on_event is not None:
            self._on_event(event)

    def pump(self) -> int:
        """Apply every queued event without blocking; return how many."""

        if self._bus is None:
            return 0
        count = 0
        for event in self._bus.drain():
            self.dispatch(event)
            count += 1
            if not self._processing:
                break
        return count

    def wait(self, timeout: Optional[float] = None, poll_interval: float = 0.1) -> bool:
        """Block until the job finishes; return ``True`` if it did in time."""

        deadline = None if timeout is None else time.monotonic() + timeout
        while self._processing and self._bus is not None:
            wait_for = poll_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                wait_for = min(poll_interval, remaining)
            event = self._bus.get(timeout=wait_for)
            if event is not None:
                self.dispatch(event)
        return self.state in FINISHED_STATES

    def _finish(self, outcome: WizardState) -> None:
        self._processing = False
        self._outcome = outcome
        self._index = self.steps.terminal_index
        self.progress_label = ""
        if outcome == WizardState.COMPLETE:
            self.progress = 100
        try:
            self.log.flush(self.log_path, self._file_system.write_text)
        except OSError as exc:
            logger.exception("Unable to write log file {}", self.log_path)
            self.log_error = str(exc)
        else:
            logger.info("Log written to {}", self.log_path)


__all__ = ["WizardState", "StepView", "Runner", "WizardSequencer"]
