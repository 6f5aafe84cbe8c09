"""Background workers that run the resource job without freezing the UI."""

from __future__ import annotations

from typing import List, Optional

from loguru import logger
from PySide6.QtCore import QObject, QThread, Signal

from ..events import EventBus
from ..jobs import Job
from ..models import Settings
from ..runner import JobInProgressError, execute


class ResourceJobWorker(QObject):
    """Run a job in a background thread; progress travels through the bus."""

    finished = Signal()

    def __init__(self, job: Job, settings: Settings, bus: EventBus) -> None:
        super().__init__()
        self._job = job
        self._settings = settings
        self._bus = bus

    def run(self) -> None:
        try:
            execute(self._job, self._settings, self._bus)
        finally:
            self.finished.emit()


class QtJobRunner(QObject):
    """Job runner backed by a ``QThread``, one job at a time."""

    def __init__(self, job: Job, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._job = job
        self._threads: List[QThread] = []
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def submit(self, settings: Settings, bus: EventBus) -> None:
        if self._busy:
            raise JobInProgressError("A job is already running")
        self._busy = True

        thread = QThread(self)
        worker = ResourceJobWorker(self._job, settings, bus)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)

        def _cleanup() -> None:
            thread.quit()
            thread.wait()
            worker.deleteLater()
            self._busy = False
            logger.debug("Job thread finished")

        worker.finished.connect(_cleanup)
        thread.finished.connect(thread.deleteLater)
        self._threads.append(thread)
        thread.finished.connect(lambda: self._threads.remove(thread))
        thread.start()


__all__ = ["ResourceJobWorker", "QtJobRunner"]
