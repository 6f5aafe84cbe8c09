"""Main window hosting the wizard steps."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger
from PySide6.QtCore import QTimer, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..config import Config, default_config
from ..generator import build_job
from ..languages import UnknownLanguage, find_language
from ..models import Language
from ..steps import build_language_steps
from ..wizard import WizardSequencer, WizardState
from .logging_bridge import LogBridge
from .widgets import FolderPicker, StepPanel
from .workers import QtJobRunner

PUMP_INTERVAL_MS = 50


class WizardWindow(QMainWindow):
    """Back/Next wizard around :class:`WizardSequencer`."""

    def __init__(
        self,
        config: Optional[Config] = None,
        solution: Optional[Path] = None,
        *,
        language: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._config = config or default_config()
        self.setWindowTitle(self._config.wizard.title)
        self.resize(820, 560)

        self._runner = QtJobRunner(build_job(self._config), self)
        self._wizard: Optional[WizardSequencer] = None

        container = QWidget(self)
        layout = QVBoxLayout(container)

        form = QFormLayout()
        self._solution_picker = FolderPicker("Select solution folder", placeholder="Solution folder")
        self._solution_picker.set_path(solution)
        form.addRow("Solution", self._solution_picker)
        self._language_combo = QComboBox(self)
        for item in self._config.language_list():
            self._language_combo.addItem(str(item), item)
        if language:
            try:
                preselected = find_language(language, self._config.language_list())
            except UnknownLanguage as exc:
                logger.warning("{}", exc)
            else:
                self._language_combo.setCurrentIndex(self._language_combo.findText(str(preselected)))
        form.addRow("Language", self._language_combo)
        layout.addLayout(form)

        self._panel = StepPanel(parent=container)
        layout.addWidget(self._panel, stretch=1)

        self._progress = QProgressBar(self)
        self._progress.setRange(0, 100)
        self._processing = QLabel("", self)
        layout.addWidget(self._progress)
        layout.addWidget(self._processing)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        self._back_button = QPushButton("Back", self)
        self._next_button = QPushButton("Next", self)
        buttons.addWidget(self._back_button)
        buttons.addWidget(self._next_button)
        layout.addLayout(buttons)
        self.setCentralWidget(container)

        self._log_bridge = LogBridge()
        self._log_bridge.message_emitted.connect(self.statusBar().showMessage)

        self._timer = QTimer(self)
        self._timer.setInterval(PUMP_INTERVAL_MS)
        self._timer.timeout.connect(self._pump)

        self._back_button.clicked.connect(self._back)
        self._next_button.clicked.connect(self._next)
        self._panel.checkbox_toggled.connect(self._checkbox_changed)
        self._language_combo.currentIndexChanged.connect(lambda _index: self._restart())

        self._restart()

    # ------------------------------------------------------------------
    # Wizard plumbing
    # ------------------------------------------------------------------
    def _selected_language(self) -> Language:
        return self._language_combo.currentData()

    def _restart(self) -> None:
        if self._wizard is not None and self._wizard.state == WizardState.PROCESSING:
            return
        language = self._selected_language()
        solution = self._solution_picker.path() or Path.cwd()
        self._wizard = WizardSequencer(
            build_language_steps(language, self._config),
            source_root=solution,
            destination_root=solution,
            runner=self._runner,
            language=language,
            log_file_name=self._config.wizard.log_file_name,
            open_log=self._open_log,
        )
        self._wizard.start()
        self._progress.setValue(0)
        self._refresh()

    def _refresh(self) -> None:
        wizard = self._wizard
        if wizard is None:
            return
        view = wizard.current_view()
        if view is not None:
            self._panel.show_step(view)
            self._back_button.setText(view.back_label)
            self._next_button.setText(view.next_label)
            self._back_button.setEnabled(view.back_enabled)
            self._next_button.setEnabled(view.next_enabled)
        editable = wizard.index == 0 and wizard.state != WizardState.PROCESSING
        self._solution_picker.setEnabled(editable)
        self._language_combo.setEnabled(editable)
        self._progress.setValue(wizard.progress)
        self._processing.setText(wizard.processing_text)

    def _next(self) -> None:
        wizard = self._wizard
        if wizard is None:
            return
        if wizard.index == 0 and wizard.state != WizardState.PROCESSING:
            solution = self._solution_picker.path()
            if not self._solution_picker.is_valid():
                QMessageBox.warning(self, "Missing solution", "Select an existing solution folder.")
                return
            if solution != wizard.source_root:
                self._restart()
                wizard = self._wizard
        if wizard.state in (WizardState.COMPLETE, WizardState.FAILED):
            wizard.advance()
            self.close()
            return
        wizard.advance()
        if wizard.state == WizardState.PROCESSING:
            self._timer.start()
        self._refresh()

    def _back(self) -> None:
        if self._wizard is not None:
            self._wizard.retreat()
            self._refresh()

    def _checkbox_changed(self, checked: bool) -> None:
        if self._wizard is not None:
            self._wizard.set_checkbox(checked)

    def _pump(self) -> None:
        wizard = self._wizard
        if wizard is None:
            return
        wizard.pump()
        self._refresh()
        if wizard.state in (WizardState.COMPLETE, WizardState.FAILED):
            self._timer.stop()
            if wizard.failure:
                details = "\n".join(self._log_bridge.recent()[-5:])
                QMessageBox.warning(self, "Generation failed", f"{wizard.failure}\n\n{details}".strip())
            elif wizard.log_error:
                QMessageBox.warning(self, "Log not written", wizard.log_error)

    def _open_log(self, path: str) -> None:
        logger.debug("Opening log {}", path)
        QDesktopServices.openUrl(QUrl.fromLocalFile(path))

    def closeEvent(self, event) -> None:  # pragma: no cover - UI only
        if self._wizard is not None and self._wizard.state == WizardState.PROCESSING:
            event.ignore()
            return
        if hasattr(self, "_log_bridge"):
            self._log_bridge.close()
        super().closeEvent(event)


__all__ = ["WizardWindow"]
