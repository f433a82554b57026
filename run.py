# -*- coding: utf-8 -*-

"""
Main entry point for launching the Side Tree application.

Usage: ``python run.py [FILE]``
"""

import sys
import tkinter as tk
import logging

import sv_ttk

from side_tree.logging_config import setup_logging
from side_tree.core.document import Document
from side_tree.ui.app import SideTreeApp

SCRATCH_TEXT = "* Scratch\nType here. Press F8 to toggle the side tree.\n"


def main(argv=None):
    """
    Configure logging, main window, and launch application.
    """
    argv = sys.argv[1:] if argv is None else argv
    setup_logging()

    root = tk.Tk()
    window_width, window_height = 1100, 720
    screen_width = root.winfo_screenwidth()
    screen_height = root.winfo_screenheight()
    pos_x = (screen_width // 2) - (window_width // 2)
    pos_y = (screen_height // 2) - (window_height // 2)
    root.geometry(f"{window_width}x{window_height}+{pos_x}+{pos_y}")

    sv_ttk.set_theme("light")

    app = SideTreeApp(root)
    if argv:
        app.open_file(argv[0])
    else:
        app.show_document(Document(SCRATCH_TEXT, kind="org", name="scratch"))

    root.mainloop()
    logging.info("===== Application terminated =====")


if __name__ == '__main__':
    main()
