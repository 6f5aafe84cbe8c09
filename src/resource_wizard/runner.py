"""Run a job off the controlling thread, one at a time."""

from __future__ import annotations

import threading
from typing import Optional

from loguru import logger

from .events import EventBus
from .jobs import Job
from .models import Settings


class JobInProgressError(RuntimeError):
    """Raised when a job is submitted while another one is still running."""


class JobRunner:
    """Execute ``job.process`` on a daemon thread.

    Whatever happens inside the job, the bus receives exactly one terminal
    event: the job's own completion or a failure published here.
    """

    def __init__(self, job: Job) -> None:
        self._job = job
        self._lock = threading.Lock()
        self._busy = False
        self._thread: Optional[threading.Thread] = None

    @property
    def busy(self) -> bool:
        return self._busy

    def submit(self, settings: Settings, bus: EventBus) -> None:
        with self._lock:
            if self._busy:
                raise JobInProgressError("A job is already running")
            self._busy = True
        self._thread = threading.Thread(
            target=self._run, args=(settings, bus), name="resource-wizard-job", daemon=True
        )
        self._thread.start()

    def _run(self, settings: Settings, bus: EventBus) -> None:
        try:
            execute(self._job, settings, bus)
        finally:
            with self._lock:
                self._busy = False

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the worker thread; return ``True`` once it has finished."""

        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()


def execute(job: Job, settings: Settings, bus: EventBus) -> None:
    """Run ``job`` on the current thread and guarantee a terminal event."""

    try:
        job.process(settings, bus)
    except Exception as exc:
        logger.exception("Job failed")
        if not bus.closed:
            bus.fail(f"Job failed: {exc}")
        return
    if not bus.closed:
        logger.warning("Job returned without publishing a completion event")
        bus.fail("Job ended without reporting completion")


__all__ = ["JobInProgressError", "JobRunner", "execute"]
