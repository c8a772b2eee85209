# -*- coding: utf-8 -*-
"""
Запуск приложения «Семейный холст».

При ошибке запуска трассировка пишется в error_log.txt и показывается окно.
"""
import os
import sys
import traceback


def _show_error(msg: str, full_traceback: str = ""):
    """Показать ошибку (когда нет консоли)."""
    if full_traceback:
        log_path = os.path.join(os.getcwd(), "error_log.txt")
        try:
            with open(log_path, "w", encoding="utf-8") as f:
                f.write(full_traceback)
            msg = f"{msg}\n\nПодробности: error_log.txt"
        except OSError:
            pass
    if len(msg) > 800:
        msg = msg[:800] + "\n...(обрезано)"
    try:
        import tkinter as tk
        from tkinter import messagebox
        root = tk.Tk()
        root.withdraw()
        messagebox.showerror("Ошибка запуска", msg)
        root.destroy()
    except Exception:
        # нет дисплея, трассировка уже в консоли
        pass


if __name__ == "__main__":
    try:
        _here = os.path.dirname(os.path.abspath(__file__))
        if _here not in sys.path:
            sys.path.insert(0, _here)
        from family_canvas.main import main
        main()
    except Exception as e:
        tb = traceback.format_exc()
        print(tb)
        _show_error(f"{type(e).__name__}: {e}", tb)
        raise
