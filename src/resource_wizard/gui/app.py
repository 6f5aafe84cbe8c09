"""Application bootstrap for the resource wizard GUI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QMessageBox

from ..config import ConfigError, load_config
from .main_window import WizardWindow

GUI_LOG_DIR = Path.home() / ".resource_wizard"


def _init_logging() -> None:
    """Send diagnostics to a rotating file; the window shows warnings itself."""

    logger.remove()
    GUI_LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(GUI_LOG_DIR / "gui.log", rotation="1 week", retention=5, level="INFO")


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="resource-wizard-gui", description="Language resource wizard")
    parser.add_argument("solution", nargs="?", type=Path, help="Solution folder to preselect")
    parser.add_argument("--config", type=Path, default=None, help="Configuration YAML")
    parser.add_argument("--language", "-l", default=None, help="Language code to preselect")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``resource-wizard-gui`` script."""

    args = _parse_args(sys.argv[1:] if argv is None else argv)
    _init_logging()
    policy = getattr(Qt.HighDpiScaleFactorRoundingPolicy, "PassThrough", None)
    if policy is not None and hasattr(QApplication, "setHighDpiScaleFactorRoundingPolicy"):
        QApplication.setHighDpiScaleFactorRoundingPolicy(policy)
    app = QApplication(sys.argv[:1])
    app.setApplicationName("Resource Wizard")

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("Configuration error: {}", exc)
        QMessageBox.critical(None, "Configuration error", str(exc))
        return 4

    window = WizardWindow(config, args.solution, language=args.language)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
