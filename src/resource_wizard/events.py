"""Event channel between the background job and the wizard, plus the wizard log."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from .models import JobResult

LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    label: str
    percent: int


@dataclass(frozen=True, slots=True)
class LogEvent:
    line: str


@dataclass(frozen=True, slots=True)
class CompletedEvent:
    result: JobResult


@dataclass(frozen=True, slots=True)
class FailedEvent:
    message: str
    result: Optional[JobResult] = None


JobEvent = Union[ProgressEvent, LogEvent, CompletedEvent, FailedEvent]
TERMINAL_EVENTS = (CompletedEvent, FailedEvent)


def is_terminal(event: JobEvent) -> bool:
    return isinstance(event, TERMINAL_EVENTS)


class EventBus:
    """Single producer, single consumer FIFO of job events.

    Exactly one terminal event (completed or failed) may be published and it is
    always the last one.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[JobEvent]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _publish(self, event: JobEvent) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError(f"Event bus already closed; dropped {event!r}")
            if is_terminal(event):
                self._closed = True
            self._queue.put(event)

    # Producer side -------------------------------------------------------
    def progress(self, label: str, percent: int) -> None:
        self._publish(ProgressEvent(label, max(0, min(100, int(percent)))))

    def log(self, line: str) -> None:
        self._publish(LogEvent(line))

    def complete(self, result: JobResult) -> None:
        self._publish(CompletedEvent(result))

    def fail(self, message: str, result: Optional[JobResult] = None) -> None:
        self._publish(FailedEvent(message, result))

    # Consumer side -------------------------------------------------------
    def get(self, timeout: Optional[float] = None) -> Optional[JobEvent]:
        """Return the next event, or ``None`` when nothing arrived in time."""

        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> Iterator[JobEvent]:
        """Yield the events that are already queued without blocking."""

        while True:
            try:
                yield self._queue.get_nowait()
            except queue.Empty:
                return


@dataclass(frozen=True, slots=True)
class LogLine:
    timestamp: datetime
    text: str

    def render(self) -> str:
        return f"{self.timestamp.strftime(LOG_TIMESTAMP_FORMAT)} - {self.text}"


@dataclass(slots=True)
class LogAccumulator:
    """Append-only wizard log, written to disk exactly once."""

    _lines: List[LogLine] = field(default_factory=list)
    flushed_to: Optional[Path] = None

    def append(self, text: str, *, timestamp: Optional[datetime] = None) -> LogLine:
        line = LogLine(timestamp or datetime.now(), text)
        self._lines.append(line)
        return line

    @property
    def lines(self) -> tuple[LogLine, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def render(self) -> str:
        return "\n".join(line.render() for line in self._lines)

    def flush(self, path: Path, write_text: Callable[[Path, str], None]) -> Path:
        """Hand the rendered log to ``write_text``; a second flush is an error."""

        if self.flushed_to is not None:
            raise RuntimeError(f"Log already written to {self.flushed_to}")
        write_text(path, self.render())
        self.flushed_to = path
        return path


__all__ = [
    "ProgressEvent",
    "LogEvent",
    "CompletedEvent",
    "FailedEvent",
    "JobEvent",
    "is_terminal",
    "EventBus",
    "LogLine",
    "LogAccumulator",
]
