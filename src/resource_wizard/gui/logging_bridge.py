"""Bridge loguru warnings into Qt signals."""

from __future__ import annotations

from collections import deque
from typing import Deque, List

from loguru import logger
from PySide6.QtCore import QObject, Signal


class LogBridge(QObject):
    """Forward loguru records to the wizard window's status line.

    The most recent messages are kept so the window can show them again after
    a failed run.
    """

    message_emitted = Signal(str)

    def __init__(self, level: str = "WARNING", history: int = 50) -> None:
        super().__init__()
        self._recent: Deque[str] = deque(maxlen=history)
        self._sink_id = logger.add(self._sink, level=level)

    def _sink(self, message) -> None:  # pragma: no cover - integrates with loguru internals
        record = message.record
        text = f"{record['level'].name}: {record['message'].rstrip()}"
        self._recent.append(text)
        self.message_emitted.emit(text)

    def recent(self) -> List[str]:
        return list(self._recent)

    def close(self) -> None:
        logger.remove(self._sink_id)


__all__ = ["LogBridge"]
