# -*- coding: utf-8 -*-
import math
import random

import pytest

from family_canvas.constants import ZOOM_LIMITS_COARSE
from family_canvas.viewport import (
    ZOOM_MODE_EXP,
    ZOOM_MODE_LINEAR,
    ZOOM_MODE_STEP,
    Transform,
    Viewport,
    content_bounds,
)

POSITIONS = {"1": (0.0, 0.0), "2": (400.0, 200.0)}


def test_default_transform():
    assert Viewport().transform == Transform(300.0, 120.0, 1.0)


def test_screen_world_inverse():
    vp = Viewport()
    vp.set_transform(15, -40, 1.7)
    wx, wy = vp.to_world(250, 90)
    assert vp.to_screen(wx, wy) == pytest.approx((250, 90))


@pytest.mark.parametrize("mode", [ZOOM_MODE_STEP, ZOOM_MODE_LINEAR, ZOOM_MODE_EXP])
def test_zoom_keeps_point_under_cursor(mode):
    vp = Viewport()
    before = vp.to_world(400, 300)
    vp.zoom_at(400, 300, -120, mode)
    assert vp.transform.k > 1
    assert vp.to_world(400, 300) == pytest.approx(before)


def test_step_zoom_factor():
    vp = Viewport()
    vp.zoom_at(0, 0, -1)
    assert vp.transform.k == pytest.approx(1.1)
    vp.zoom_at(0, 0, 1)
    assert vp.transform.k == pytest.approx(1.0)


def test_linear_zoom_factor():
    vp = Viewport()
    vp.zoom_at(0, 0, 120, ZOOM_MODE_LINEAR)
    assert vp.transform.k == pytest.approx(0.9)


@pytest.mark.parametrize("mode", [ZOOM_MODE_STEP, ZOOM_MODE_EXP])
def test_zoom_in_then_out_restores_view(mode):
    vp = Viewport()
    start = vp.transform
    for _ in range(3):
        vp.zoom_at(310, 205, -100, mode)
    for _ in range(3):
        vp.zoom_at(310, 205, 100, mode)
    assert vp.transform.k == pytest.approx(start.k)
    assert (vp.transform.x, vp.transform.y) == pytest.approx((start.x, start.y))


def test_scale_is_clamped():
    vp = Viewport()
    for _ in range(50):
        vp.zoom_at(0, 0, -120)
    assert vp.transform.k == 2.2
    for _ in range(50):
        vp.zoom_at(0, 0, 120)
    assert vp.transform.k == 0.4


def test_coarse_limits():
    vp = Viewport(limits=ZOOM_LIMITS_COARSE)
    vp.set_scale_at(0, 0, 10)
    assert vp.transform.k == 3.0


def test_scale_stays_in_range_for_any_sequence():
    rng = random.Random(3)
    vp = Viewport()
    for _ in range(300):
        op = rng.choice(["wheel", "pan", "fit", "reset", "set"])
        if op == "wheel":
            vp.zoom_at(rng.uniform(0, 800), rng.uniform(0, 600), rng.uniform(-500, 500),
                       rng.choice([ZOOM_MODE_STEP, ZOOM_MODE_LINEAR, ZOOM_MODE_EXP]))
        elif op == "pan":
            vp.pan_by(rng.uniform(-100, 100), rng.uniform(-100, 100))
        elif op == "fit":
            vp.fit_to_bounds(POSITIONS, rng.uniform(1, 2000), rng.uniform(1, 2000))
        elif op == "reset":
            vp.reset()
        else:
            vp.set_transform(0, 0, rng.uniform(0.01, 100))
        assert 0.4 <= vp.transform.k <= 2.2


def test_non_finite_input_is_ignored():
    vp = Viewport()
    start = vp.transform
    vp.zoom_at(0, 0, math.nan)
    vp.zoom_at(0, 0, 0)
    vp.set_transform(math.inf, 0, 1)
    vp.set_translation(0, math.nan)
    vp.set_scale_at(0, 0, -1)
    assert vp.transform == start


def test_zoom_step_matches_wheel_notch():
    a, b = Viewport(), Viewport()
    a.zoom_step(1, 100, 100)
    b.zoom_at(100, 100, -120)
    assert a.transform == b.transform


def test_content_bounds():
    assert content_bounds({}) is None
    assert content_bounds(POSITIONS) == (-40.0, -40.0, 600.0, 350.0)


def test_fit_centers_content():
    vp = Viewport()
    t = vp.fit_to_bounds(POSITIONS, 800, 600)
    assert t.k == pytest.approx(1.25)
    assert vp.to_screen(280, 155) == pytest.approx((400, 300))


def test_fit_is_clamped():
    vp = Viewport()
    assert vp.fit_to_bounds(POSITIONS, 10, 10).k == 0.4


def test_fit_empty_resets():
    vp = Viewport()
    vp.set_transform(1, 2, 2)
    assert vp.fit_to_bounds({}, 800, 600) == vp.default
    vp.set_transform(1, 2, 2)
    assert vp.fit_to_bounds(POSITIONS, 0, 600) == vp.default


def test_print_restores_transform():
    vp = Viewport()
    vp.set_transform(5, 6, 2)
    seen = []
    result = vp.print_fitted(POSITIONS, 800, 600, lambda: seen.append(vp.transform) or "ok")
    assert result == "ok"
    assert seen[0].k == pytest.approx(1.25)
    assert vp.transform == Transform(5.0, 6.0, 2.0)


def test_print_restores_transform_on_error():
    vp = Viewport()
    vp.set_transform(5, 6, 2)

    def broken_printer():
        raise OSError("принтер недоступен")

    with pytest.raises(OSError):
        vp.print_fitted(POSITIONS, 800, 600, broken_printer)
    assert vp.transform == Transform(5.0, 6.0, 2.0)
