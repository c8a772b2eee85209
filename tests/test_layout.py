# -*- coding: utf-8 -*-
import random

from family_canvas.constants import LayoutConfig
from family_canvas.layout import build_units, compute_layout, couple_slot_width
from family_canvas.models import FamilyGraph


def test_two_unlinked_people_take_separate_slots(graph):
    a, _ = graph.add_person("A")
    b, _ = graph.add_person("B")
    assert compute_layout(graph) == {a: (20.0, 0), b: (220.0, 0)}


def test_couple_and_child(couple_graph):
    positions = compute_layout(couple_graph)
    assert positions["1"] == (20.0, 0)
    assert positions["2"] == (200.0, 0)
    assert positions["3"] == (110.0, 200)


def test_couple_slot_width_default():
    assert couple_slot_width(LayoutConfig()) == 380


def test_unit_after_couple_starts_after_couple_slot(couple_graph):
    d, _ = couple_graph.add_person("D")
    assert compute_layout(couple_graph)[d] == (400.0, 0)


def test_partner_is_first_unplaced_spouse(graph):
    a, _ = graph.add_person("A")
    b, _ = graph.add_person("B")
    c, _ = graph.add_person("C")
    graph.add_spouse_link(a, c)
    graph.add_spouse_link(a, b)
    assert build_units(graph, [a, b, c]) == [(a, b), (c,)]


def test_spouse_on_other_level_not_paired(couple_graph):
    d, _ = couple_graph.add_person("D", spouse="3")
    assert build_units(couple_graph, ["1", "2", d]) == [("1", "2"), (d,)]


def test_grandchild_follows_centered_parent(couple_graph):
    e, _ = couple_graph.add_person("E", parent_a="3")
    positions = compute_layout(couple_graph)
    assert positions[e] == (positions["3"][0], 400)


def test_layout_is_idempotent_and_pure(couple_graph):
    before = couple_graph.to_snapshot()
    assert compute_layout(couple_graph) == compute_layout(couple_graph)
    assert couple_graph.to_snapshot() == before


def test_rows_follow_depth_and_x_is_never_negative():
    rng = random.Random(7)
    g = FamilyGraph()
    ids = []
    for i in range(25):
        parent = rng.choice(ids) if ids and rng.random() < 0.7 else None
        pid, _ = g.add_person(f"P{i}", parent_a=parent)
        ids.append(pid)
        if len(ids) > 2 and rng.random() < 0.2:
            g.add_spouse_link(pid, rng.choice(ids[:-1]))
    positions = compute_layout(g)
    assert list(positions) == g.order
    assert all(x >= 0 for x, _ in positions.values())


def test_negative_coordinates_are_shifted():
    config = LayoutConfig(slot_width=100, card_width=160)
    g = FamilyGraph()
    g.add_person("A")
    g.add_person("B")
    positions = compute_layout(g, config=config)
    assert min(x for x, _ in positions.values()) == 0
    assert positions["2"][0] - positions["1"][0] == 100


def test_empty_graph(graph):
    assert compute_layout(graph) == {}
