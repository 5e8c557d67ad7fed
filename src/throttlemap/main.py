"""
Application Initialization
==========================
Builds the store and the main window and starts the Qt event loop.

Why is this file needed?
------------------------
It is the dependency-injection root. It:
1. Configures logging.
2. Creates the QApplication.
3. Instantiates the CurveStore (model + edit session).
4. Passes the store into the MainWindow.
"""
import logging
import sys
from typing import Optional

import pyqtgraph as pg

from throttlemap.app.application import create_app
from throttlemap.app.state import CurveStore
from throttlemap.logging_config import setup_logging
from throttlemap.view.main_window import MainWindow

pg.setConfigOption("background", "w")
pg.setConfigOption("foreground", "k")


def main(level: int = logging.INFO, log_file: Optional[str] = None) -> int:
    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=level, log_file=log_file)

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the Data Model
    store = CurveStore()

    # 4. Initialize the Main Window, passing the store
    window = MainWindow(store)
    window.show()

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
