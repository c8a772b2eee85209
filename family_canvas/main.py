# -*- coding: utf-8 -*-
"""
Точка входа приложения «Семейный холст».
Запуск: python -m family_canvas.main (или python main.py из корня проекта)
"""
import logging
import os
import tkinter as tk

from family_canvas.app import FamilyCanvasApp
from family_canvas.scene import FamilyDiagram

LOG_LEVEL_ENV = "FAMILY_CANVAS_LOG"


def configure_logging():
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    diagram = FamilyDiagram()
    diagram.seed_demo()
    root = tk.Tk()
    FamilyCanvasApp(root, diagram=diagram)
    root.mainloop()


if __name__ == "__main__":
    main()
