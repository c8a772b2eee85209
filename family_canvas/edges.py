# -*- coding: utf-8 -*-
"""
Линии связей: родитель → ребёнок, супруги, братья/сёстры.

Все точки — в логических координатах холста. Ссылки на персон без позиции
(удалённых или не загруженных) молча пропускаются.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from family_canvas.constants import DEFAULT_LAYOUT

EDGE_PARENT = "parent"
EDGE_SPOUSE = "spouse"
EDGE_SIBLING = "sibling"

STYLE_ORTHOGONAL = "orthogonal"
STYLE_CUBIC = "cubic"

Point = Tuple[float, float]


@dataclass(frozen=True)
class Edge:
    kind: str
    # id родителя, ключ брака (для линии от середины брака) или id персоны
    source: Union[str, Tuple[str, str]]
    target: str
    points: Tuple[Point, ...]
    style: str = STYLE_ORTHOGONAL


def top_center(pos, config=DEFAULT_LAYOUT):
    return pos[0] + config.card_width / 2, pos[1]


def bottom_center(pos, config=DEFAULT_LAYOUT):
    return pos[0] + config.card_width / 2, pos[1] + config.card_height


def spouse_connector(pos_a, pos_b, config=DEFAULT_LAYOUT):
    """Горизонтальная линия между серединами боковых сторон карточек (левая → правая)."""
    left, right = sorted((pos_a, pos_b))
    half_h = config.card_height / 2
    return (left[0] + config.card_width, left[1] + half_h), (right[0], right[1] + half_h)


def family_joint(pos_a, pos_b, config=DEFAULT_LAYOUT):
    """Середина супружеской линии — общая точка выхода линий к детям пары."""
    (x1, y1), (x2, y2) = spouse_connector(pos_a, pos_b, config)
    return (x1 + x2) / 2, (y1 + y2) / 2


def orthogonal_path(start, end):
    """Ломаная: вниз до середины, по горизонтали, вниз к цели."""
    mid_y = (start[1] + end[1]) / 2
    return (start, (start[0], mid_y), (end[0], mid_y), end)


def path_cubic(x1, y1, x2, y2):
    """Опорные точки кубической кривой Безье (S-образная связь)."""
    dx = (x2 - x1) * 0.5
    return ((x1, y1), (x1 + dx, y1), (x2 - dx, y2), (x2, y2))


def _link(start, end, style):
    if style == STYLE_CUBIC:
        return path_cubic(start[0], start[1], end[0], end[1])
    return orthogonal_path(start, end)


def route_edges(graph, positions, config=DEFAULT_LAYOUT, siblings=True, style=STYLE_ORTHOGONAL):
    """Список Edge: сначала супруги, затем родители → дети, затем братья/сёстры."""
    edges = []

    for a, b in sorted(graph.marriages):
        if a in positions and b in positions:
            p1, p2 = spouse_connector(positions[a], positions[b], config)
            edges.append(Edge(EDGE_SPOUSE, a, b, (p1, p2)))

    for person in graph.iter_persons():
        pid = person.id
        if pid not in positions:
            continue
        child_top = top_center(positions[pid], config)
        parents = person.parents
        if (len(parents) == 2 and graph.is_married(parents[0], parents[1])
                and parents[0] in positions and parents[1] in positions):
            joint = family_joint(positions[parents[0]], positions[parents[1]], config)
            key = tuple(sorted(parents))
            edges.append(Edge(EDGE_PARENT, key, pid, _link(joint, child_top, style), style))
            continue
        for parent_id in parents:
            if parent_id not in positions:
                continue
            start = bottom_center(positions[parent_id], config)
            edges.append(Edge(EDGE_PARENT, parent_id, pid, _link(start, child_top, style), style))

    if siblings:
        edges.extend(route_sibling_edges(graph, positions, config))
    return edges


def route_sibling_edges(graph, positions, config=DEFAULT_LAYOUT):
    """Короткие перемычки между соседними (по x) детьми одних и тех же родителей."""
    groups = {}
    for person in graph.iter_persons():
        if person.parents and person.id in positions:
            groups.setdefault(tuple(sorted(person.parents)), []).append(person.id)

    edges = []
    for members in groups.values():
        if len(members) < 2:
            continue
        members.sort(key=lambda pid: positions[pid][0])
        for left, right in zip(members, members[1:]):
            lx, ly = top_center(positions[left], config)
            rx, ry = top_center(positions[right], config)
            y = min(ly, ry) - config.sibling_rise
            edges.append(Edge(EDGE_SIBLING, left, right, ((lx, y), (rx, y))))
    return edges
