# -*- coding: utf-8 -*-
"""
Панорамирование и масштаб холста.

Экран ↔ холст: screen = world * k + (x, y), world = (screen - (x, y)) / k.
Масштаб k всегда внутри [k_min, k_max]: значения за пределами обрезаются,
а не отвергаются.
"""

import logging
import math
from dataclasses import dataclass, replace

from family_canvas.constants import (
    DEFAULT_LAYOUT,
    DEFAULT_TRANSFORM,
    ZOOM_LIMITS,
    ZOOM_STEP,
    ZOOM_LINEAR_STEP,
    ZOOM_EXP_RATE,
    ZOOM_BUTTON_DELTA,
)

logger = logging.getLogger(__name__)

ZOOM_MODE_STEP = "step"
ZOOM_MODE_LINEAR = "linear"
ZOOM_MODE_EXP = "exp"


@dataclass(frozen=True)
class Transform:
    x: float
    y: float
    k: float

    def as_dict(self):
        return {"x": self.x, "y": self.y, "k": self.k}


def _finite(*values):
    return all(isinstance(v, (int, float)) and math.isfinite(v) for v in values)


def content_bounds(positions, config=DEFAULT_LAYOUT):
    """Прямоугольник всех карточек с полями: (min_x, min_y, max_x, max_y) или None."""
    if not positions:
        return None
    xs = [x for x, _ in positions.values()]
    ys = [y for _, y in positions.values()]
    margin = config.fit_margin
    return (min(xs) - margin, min(ys) - margin,
            max(xs) + config.card_width + margin, max(ys) + config.card_height + margin)


class Viewport:
    def __init__(self, default=DEFAULT_TRANSFORM, limits=ZOOM_LIMITS):
        self.k_min, self.k_max = limits
        x, y, k = default
        self.default = Transform(float(x), float(y), self.clamp_scale(k))
        self.transform = self.default

    def clamp_scale(self, k):
        return min(self.k_max, max(self.k_min, k))

    # --- ПРЕОБРАЗОВАНИЕ КООРДИНАТ ---
    def to_world(self, sx, sy):
        t = self.transform
        return (sx - t.x) / t.k, (sy - t.y) / t.k

    def to_screen(self, wx, wy):
        t = self.transform
        return wx * t.k + t.x, wy * t.k + t.y

    # --- ИЗМЕНЕНИЕ СОСТОЯНИЯ ---
    def set_transform(self, x, y, k):
        """Устанавливает состояние целиком (например, из сохранённых настроек)."""
        if not _finite(x, y, k) or k <= 0:
            return self.transform
        self.transform = Transform(float(x), float(y), self.clamp_scale(k))
        return self.transform

    def set_translation(self, x, y):
        if _finite(x, y):
            self.transform = replace(self.transform, x=float(x), y=float(y))
        return self.transform

    def pan_by(self, dx, dy):
        t = self.transform
        return self.set_translation(t.x + dx, t.y + dy)

    def set_scale_at(self, sx, sy, k):
        """Меняет масштаб так, чтобы точка холста под (sx, sy) осталась на месте."""
        if not _finite(sx, sy, k) or k <= 0:
            return self.transform
        wx, wy = self.to_world(sx, sy)
        new_k = self.clamp_scale(k)
        self.transform = Transform(sx - wx * new_k, sy - wy * new_k, new_k)
        return self.transform

    def zoom_at(self, sx, sy, delta_y, mode=ZOOM_MODE_STEP):
        """Колесо мыши: delta_y < 0 — приблизить, > 0 — отдалить."""
        if not _finite(delta_y) or delta_y == 0:
            return self.transform
        k = self.transform.k
        if mode == ZOOM_MODE_EXP:
            new_k = k * math.exp(-delta_y * ZOOM_EXP_RATE)
        elif mode == ZOOM_MODE_LINEAR:
            new_k = k * (1 - math.copysign(ZOOM_LINEAR_STEP, delta_y))
        else:
            new_k = k * ZOOM_STEP if delta_y < 0 else k / ZOOM_STEP
        return self.set_scale_at(sx, sy, new_k)

    def zoom_step(self, direction, sx, sy, mode=ZOOM_MODE_STEP):
        """Кнопки «+»/«−»: как прокрутка колеса на одно деление."""
        return self.zoom_at(sx, sy, -direction * ZOOM_BUTTON_DELTA, mode)

    def reset(self):
        self.transform = self.default
        return self.transform

    # --- ВПИСАТЬ В ОКНО ---
    def fit_to_bounds(self, positions, viewport_w, viewport_h, config=DEFAULT_LAYOUT):
        bounds = content_bounds(positions, config)
        if bounds is None or viewport_w <= 0 or viewport_h <= 0:
            return self.reset()
        min_x, min_y, max_x, max_y = bounds
        content_w = max(max_x - min_x, 1)
        content_h = max(max_y - min_y, 1)
        k = self.clamp_scale(min(viewport_w / content_w, viewport_h / content_h))
        cx = (min_x + max_x) / 2
        cy = (min_y + max_y) / 2
        self.transform = Transform(viewport_w / 2 - cx * k, viewport_h / 2 - cy * k, k)
        logger.debug(f"Вписано: k={k:.3f}, область {content_w:.0f}x{content_h:.0f}")
        return self.transform

    def print_fitted(self, positions, viewport_w, viewport_h, print_fn, config=DEFAULT_LAYOUT):
        """Временно вписывает дерево, вызывает печать и возвращает прежний вид."""
        saved = self.transform
        try:
            self.fit_to_bounds(positions, viewport_w, viewport_h, config)
            return print_fn()
        finally:
            self.transform = saved
