# -*- coding: utf-8 -*-
import logging
import random

from family_canvas.layering import compute_depths, group_by_level
from family_canvas.models import FamilyGraph


def _random_dag(seed, size=30):
    rng = random.Random(seed)
    g = FamilyGraph()
    ids = []
    for i in range(size):
        parents = rng.sample(ids, k=min(len(ids), rng.randint(0, 2)))
        pid, _ = g.add_person(f"P{i}", parent_a=parents[0] if parents else None,
                              parent_b=parents[1] if len(parents) > 1 else None)
        ids.append(pid)
    return g


def test_roots_are_level_zero(couple_graph):
    depth, _ = compute_depths(couple_graph)
    assert depth == {"1": 0, "2": 0, "3": 1}


def test_depth_is_one_plus_deepest_parent(graph):
    a, _ = graph.add_person("A")
    b, _ = graph.add_person("B", parent_a=a)
    c, _ = graph.add_person("C")
    d, _ = graph.add_person("D", parent_a=b, parent_b=c)
    depth, children = compute_depths(graph)
    assert depth[d] == 2
    assert children[b] == [d]
    assert children[c] == [d]


def test_depth_rule_on_random_trees():
    for seed in range(5):
        g = _random_dag(seed)
        depth, _ = compute_depths(g)
        for person in g.iter_persons():
            if person.parents:
                assert depth[person.id] == 1 + max(depth[p] for p in person.parents)
            else:
                assert depth[person.id] == 0


def test_cycle_falls_back_to_zero(graph, caplog):
    graph.load_snapshot({
        "people": {
            "1": {"name": "A", "parents": ["2"]},
            "2": {"name": "B", "parents": ["1"]},
            "3": {"name": "C"},
        },
        "order": ["1", "2", "3"],
    })
    with caplog.at_level(logging.WARNING, logger="family_canvas.layering"):
        depth, _ = compute_depths(graph)
    assert depth == {"1": 0, "2": 0, "3": 0}
    assert any("Цикл" in r.getMessage() for r in caplog.records)


def test_dangling_parent_is_ignored(graph):
    graph.load_snapshot({
        "people": {"1": {"name": "A", "parents": ["99"]}},
        "order": ["1"],
    })
    depth, _ = compute_depths(graph)
    assert depth == {"1": 0}


def test_group_by_level_keeps_insertion_order(couple_graph):
    couple_graph.add_person("D")
    depth, _ = compute_depths(couple_graph)
    assert group_by_level(couple_graph, depth) == {0: ["1", "2", "4"], 1: ["3"]}


def test_partial_cycle_keeps_depth_from_resolved_parent(graph):
    graph.load_snapshot({
        "people": {
            "3": {"name": "Root"},
            "1": {"name": "A", "parents": ["3", "2"]},
            "2": {"name": "B", "parents": ["1"]},
        },
        "order": ["3", "1", "2"],
    })
    depth, _ = compute_depths(graph)
    assert depth == {"3": 0, "1": 1, "2": 0}
