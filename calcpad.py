"""
Calcpad
Main application entry point
"""
import tkinter as tk
import threading
import logging

import config
import api
from app_logging import setup_logging
from gui import CalculatorGUI

logger = logging.getLogger("calcpad")


def start_api_server():
    """Serve the web portal from a background thread; it stops with the GUI"""
    thread = threading.Thread(target=api.run_server, name="calcpad-web", daemon=True)
    thread.start()
    logger.info("Web portal thread started on port %s", config.WEB_PORT)
    return thread


def main():
    setup_logging()

    if config.START_WEB_PORTAL:
        start_api_server()

    root = tk.Tk()
    CalculatorGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
