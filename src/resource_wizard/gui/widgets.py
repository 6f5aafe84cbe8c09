"""Reusable Qt widgets for the resource wizard window."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..wizard import StepView


class FolderPicker(QWidget):
    """Line edit plus a browse button for choosing a folder."""

    path_changed = Signal(Path)

    def __init__(self, caption: str, *, placeholder: str | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._caption = caption
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._edit = QLineEdit(self)
        if placeholder:
            self._edit.setPlaceholderText(placeholder)
        layout.addWidget(self._edit, stretch=1)
        button = QPushButton("Browse…", self)
        button.clicked.connect(self._choose_path)
        layout.addWidget(button)
        self._edit.textChanged.connect(self._emit_path)

    def set_path(self, path: Optional[Path]) -> None:
        self._edit.setText(str(path or ""))

    def path(self) -> Path | None:
        value = self._edit.text().strip()
        return Path(value) if value else None

    def _choose_path(self) -> None:
        current = self.path()
        directory = QFileDialog.getExistingDirectory(self, self._caption, str(current or Path.home()))
        if directory:
            self._edit.setText(directory)

    def is_valid(self) -> bool:
        current = self.path()
        return current is not None and current.is_dir()

    def _emit_path(self, text: str) -> None:
        valid = self.is_valid()
        self._edit.setStyleSheet("" if valid or not text else "color: #b00020;")
        self._edit.setToolTip("" if valid or not text else "Folder does not exist")
        if valid:
            self.path_changed.emit(Path(text.strip()))


class StepPanel(QWidget):
    """Title, description, body text and optional checkbox of a wizard step."""

    checkbox_toggled = Signal(bool)

    def __init__(self, *, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        self._title = QLabel(self)
        font = self._title.font()
        font.setBold(True)
        font.setPointSize(font.pointSize() + 3)
        self._title.setFont(font)
        self._description = QLabel(self)
        self._description.setWordWrap(True)
        line = QFrame(self)
        line.setFrameShape(QFrame.HLine)
        self._content = QLabel(self)
        self._content.setWordWrap(True)
        self._content.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        self._content.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self._checkbox = QCheckBox(self)
        self._checkbox.toggled.connect(self.checkbox_toggled)

        layout.addWidget(self._title)
        layout.addWidget(self._description)
        layout.addWidget(line)
        layout.addWidget(self._content, stretch=1)
        layout.addWidget(self._checkbox)

    def show_step(self, view: StepView) -> None:
        self._title.setText(view.title)
        self._description.setText(view.description)
        self._content.setText(view.content)
        self._checkbox.blockSignals(True)
        self._checkbox.setText(view.checkbox_text)
        self._checkbox.setChecked(view.checkbox_value)
        self._checkbox.blockSignals(False)
        self._checkbox.setVisible(view.show_checkbox)


__all__ = ["FolderPicker", "StepPanel"]
