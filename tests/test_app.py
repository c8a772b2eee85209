# -*- coding: utf-8 -*-
from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")
pytest.importorskip("PIL.ImageTk")

from family_canvas import main as main_module  # noqa: E402
from family_canvas.app import FamilyCanvasApp  # noqa: E402


class FakeRoot:
    def __init__(self):
        self.protocols = []
        self.looped = False

    def protocol(self, name, handler):
        self.protocols.append(name)

    def mainloop(self):
        self.looped = True


def test_main_leaves_close_handler_to_app(monkeypatch):
    roots = []
    apps = []

    def make_root():
        roots.append(FakeRoot())
        return roots[-1]

    monkeypatch.setattr(main_module.tk, "Tk", make_root)
    monkeypatch.setattr(main_module, "FamilyCanvasApp",
                        lambda root, diagram: apps.append(diagram))
    main_module.main()
    assert roots[0].protocols == []
    assert roots[0].looped
    assert len(apps[0].graph) == 5


def test_photo_cache_is_dropped_when_scale_changes():
    app = SimpleNamespace(photo_images={}, photo_scale=None)
    FamilyCanvasApp.sync_photo_cache(app, 1.0)
    app.photo_images[("1", 0, "1.00")] = "img"
    FamilyCanvasApp.sync_photo_cache(app, 1.0)
    assert len(app.photo_images) == 1
    FamilyCanvasApp.sync_photo_cache(app, 1.1)
    assert app.photo_images == {}
    assert app.photo_scale == 1.1
