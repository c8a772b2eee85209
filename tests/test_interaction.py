# -*- coding: utf-8 -*-
import pytest

from family_canvas.interaction import GestureState, InteractionDispatcher


@pytest.fixture
def family(diagram):
    a, _ = diagram.add_person("A")
    b, _ = diagram.add_person("B")
    diagram.add_spouse_link(a, b)
    diagram.add_person("C", parent_a=a, parent_b=b)
    return diagram


@pytest.fixture
def selected():
    return []


@pytest.fixture
def dispatcher(family, selected):
    return InteractionDispatcher(family, on_select=selected.append)


def test_background_press_pans(dispatcher, family):
    start = family.transform
    assert dispatcher.pointer_down(100, 100)
    assert dispatcher.state is GestureState.PANNING
    assert dispatcher.pointer_move(130, 90)
    assert (family.transform.x, family.transform.y) == (start.x + 30, start.y - 10)
    assert dispatcher.pointer_up() is GestureState.PANNING
    assert dispatcher.state is GestureState.IDLE


def test_card_press_drags_in_world_units(dispatcher, family):
    family.viewport.set_transform(0, 0, 2)
    base = family.base_positions["3"]
    dispatcher.pointer_down(100, 100, node_id="3")
    assert dispatcher.state is GestureState.DRAGGING
    dispatcher.pointer_move(140, 120)
    assert family.offsets.get("3") == (20.0, 10.0)
    assert family.positions()["3"] == (base[0] + 20, base[1] + 10)
    assert family.base_positions["3"] == base
    assert family.transform.x == 0


def test_drag_continues_from_previous_offset(dispatcher, family):
    family.offsets.set("3", 5, 5)
    dispatcher.pointer_down(0, 0, node_id="3")
    dispatcher.pointer_move(10, 0)
    dispatcher.pointer_up()
    assert family.offsets.get("3") == (15.0, 5.0)


def test_second_press_is_ignored_while_active(dispatcher):
    dispatcher.pointer_down(0, 0, node_id="3")
    assert not dispatcher.pointer_down(0, 0)
    assert dispatcher.state is GestureState.DRAGGING


def test_press_on_chrome_is_ignored(dispatcher):
    assert not dispatcher.pointer_down(0, 0, on_chrome=True)
    assert dispatcher.state is GestureState.IDLE


def test_unknown_node_pans(dispatcher):
    dispatcher.pointer_down(0, 0, node_id="99")
    assert dispatcher.state is GestureState.PANNING


def test_small_move_is_a_click(dispatcher, family, selected):
    dispatcher.pointer_down(50, 50, node_id="2")
    assert not dispatcher.pointer_move(53, 52)
    dispatcher.pointer_up()
    assert selected == ["2"]
    assert "2" not in family.offsets


def test_background_click_clears_selection(dispatcher, selected):
    dispatcher.pointer_down(0, 0)
    dispatcher.pointer_up()
    assert selected == [None]


def test_drag_is_not_a_click(dispatcher, selected):
    dispatcher.pointer_down(0, 0, node_id="2")
    dispatcher.pointer_move(40, 0)
    dispatcher.pointer_move(2, 0)
    dispatcher.pointer_up()
    assert selected == []


def test_move_without_press_does_nothing(dispatcher, family):
    start = family.transform
    assert not dispatcher.pointer_move(300, 300)
    assert family.transform == start


def test_wheel_zooms_in_any_state(dispatcher, family):
    dispatcher.pointer_down(0, 0, node_id="3")
    assert dispatcher.wheel(400, 300, -120)
    assert family.transform.k == pytest.approx(1.1)
    assert dispatcher.state is GestureState.DRAGGING


def test_offsets_survive_unrelated_edit(dispatcher, family):
    dispatcher.pointer_down(0, 0, node_id="3")
    dispatcher.pointer_move(60, 0)
    dispatcher.pointer_up()
    family.add_person("D")
    assert family.offsets.get("3") == (60.0, 0.0)
    assert family.positions()["3"][0] == family.base_positions["3"][0] + 60


def test_double_click_background_resets_view(dispatcher, family):
    family.viewport.set_transform(0, 0, 2)
    dispatcher.double_click()
    assert family.transform == family.viewport.default


def test_keys(dispatcher, family):
    assert dispatcher.key_press("plus")
    assert family.transform.k == pytest.approx(1.1)
    assert dispatcher.key_press("minus")
    assert family.transform.k == pytest.approx(1.0)
    x = family.transform.x
    assert dispatcher.key_press("Left")
    assert family.transform.x == x + 40
    assert dispatcher.key_press("0")
    assert family.transform == family.viewport.default
    assert dispatcher.key_press("f")
    assert family.transform != family.viewport.default
    assert not dispatcher.key_press("q")


def test_escape_cancels_gesture(dispatcher):
    dispatcher.pointer_down(0, 0)
    assert dispatcher.key_press("Escape")
    assert dispatcher.state is GestureState.IDLE


def test_redraw_requested_on_move(dispatcher, family):
    calls = []
    family.subscribe(lambda: calls.append(1))
    dispatcher.pointer_down(0, 0)
    dispatcher.pointer_move(20, 20)
    dispatcher.pointer_move(25, 20)
    assert len(calls) == 2
