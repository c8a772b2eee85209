# -*- coding: utf-8 -*-
"""
Разбор жестов мыши и клавиатуры.

Жест один на всё окно: Ожидание, Перемещение холста или Перетаскивание
карточки. Колесо мыши всегда масштабирует и от жеста не зависит.
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Optional

from family_canvas.constants import DRAG_THRESHOLD, KEY_PAN_STEP
from family_canvas.viewport import ZOOM_MODE_STEP

logger = logging.getLogger(__name__)


class GestureState(enum.Enum):
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class Gesture:
    state: GestureState = GestureState.IDLE
    node_id: Optional[str] = None
    # точка нажатия на экране
    start_x: float = 0.0
    start_y: float = 0.0
    # сдвиг холста (PANNING) или смещение карточки (DRAGGING) в момент нажатия
    origin_x: float = 0.0
    origin_y: float = 0.0
    moved: bool = False


IDLE = Gesture()

KEY_ZOOM_IN = ("plus", "equal", "KP_Add", "+", "=")
KEY_ZOOM_OUT = ("minus", "KP_Subtract", "-")
KEY_RESET = ("0", "KP_0")
KEY_FIT = ("f", "F")
KEY_CANCEL = ("Escape",)
KEY_PAN = {
    "Left": (KEY_PAN_STEP, 0),
    "Right": (-KEY_PAN_STEP, 0),
    "Up": (0, KEY_PAN_STEP),
    "Down": (0, -KEY_PAN_STEP),
}


class InteractionDispatcher:
    """Переводит события указателя в изменения вида (Viewport) или смещений (OffsetModel)."""

    def __init__(self, diagram, on_select=None, zoom_mode=ZOOM_MODE_STEP, drag_threshold=DRAG_THRESHOLD):
        self.diagram = diagram
        self.on_select = on_select
        self.zoom_mode = zoom_mode
        self.drag_threshold = drag_threshold
        self.gesture = IDLE

    @property
    def state(self):
        return self.gesture.state

    def pointer_down(self, sx, sy, node_id=None, on_chrome=False):
        """Начинает жест. Возвращает True, если жест начат."""
        if self.gesture.state is not GestureState.IDLE or on_chrome:
            return False
        if node_id is not None and node_id in self.diagram.graph:
            dx, dy = self.diagram.offsets.get(node_id)
            self.gesture = Gesture(GestureState.DRAGGING, node_id, sx, sy, dx, dy)
        else:
            t = self.diagram.viewport.transform
            self.gesture = Gesture(GestureState.PANNING, None, sx, sy, t.x, t.y)
        return True

    def pointer_move(self, sx, sy):
        g = self.gesture
        if g.state is GestureState.IDLE:
            return False
        dx = sx - g.start_x
        dy = sy - g.start_y
        if not g.moved and dx * dx + dy * dy <= self.drag_threshold * self.drag_threshold:
            return False
        if g.state is GestureState.PANNING:
            self.diagram.viewport.set_translation(g.origin_x + dx, g.origin_y + dy)
        else:
            k = self.diagram.viewport.transform.k
            self.diagram.offsets.set(g.node_id, g.origin_x + dx / k, g.origin_y + dy / k)
        if not g.moved:
            self.gesture = replace(g, moved=True)
        self.diagram.notify()
        return True

    def pointer_up(self):
        """Завершает жест; короткое нажатие без движения считается кликом."""
        g = self.gesture
        self.gesture = IDLE
        if g.state is GestureState.IDLE or g.moved:
            return g.state
        if self.on_select is not None:
            self.on_select(g.node_id)
        return g.state

    def cancel(self):
        self.gesture = IDLE

    def wheel(self, sx, sy, delta_y):
        """Масштаб относительно курсора. True — событие обработано, прокрутку страницы не делать."""
        self.diagram.viewport.zoom_at(sx, sy, delta_y, self.zoom_mode)
        self.diagram.notify()
        return True

    def double_click(self, node_id=None):
        if node_id is None:
            self.diagram.viewport.reset()
            self.diagram.notify()

    def key_press(self, key):
        """Клавиши: +/− масштаб от центра окна, 0 — сброс, f — вписать, стрелки — сдвиг, Esc — отмена."""
        width, height = self.diagram.viewport_size
        if key in KEY_ZOOM_IN:
            self.diagram.viewport.zoom_step(1, width / 2, height / 2, self.zoom_mode)
        elif key in KEY_ZOOM_OUT:
            self.diagram.viewport.zoom_step(-1, width / 2, height / 2, self.zoom_mode)
        elif key in KEY_RESET:
            self.diagram.viewport.reset()
        elif key in KEY_FIT:
            self.diagram.fit()
        elif key in KEY_PAN:
            self.diagram.viewport.pan_by(*KEY_PAN[key])
        elif key in KEY_CANCEL:
            self.cancel()
            return True
        else:
            return False
        self.diagram.notify()
        return True
