"""Entry point for the Translation Editor."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def main() -> None:
    from PySide6.QtWidgets import QApplication

    from transeditor.main_window import MainWindow

    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    app.setApplicationName("Translation Editor")
    app.setOrganizationName("TransEditor")

    window = MainWindow()

    # Optional "source destination" pair on the command line wins over the
    # pair remembered from the previous run
    args = sys.argv[1:]
    if len(args) >= 2 and all(Path(a).is_file() for a in args[:2]):
        window.load_pair(args[0], args[1])
    else:
        window.restore_last_pair()

    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
