"""Desktop editor entry point."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from docsign.core.config import settings
from docsign.ui.main_window import MainWindow


def main() -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    app.setApplicationName(settings.APP_NAME)
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
