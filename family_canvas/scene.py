# -*- coding: utf-8 -*-
"""
Сцена дерева: чистый расчёт позиций и линий плюс объект-контекст FamilyDiagram,
который владеет моделью, смещениями и видом и пересчитывает компоновку после
каждого изменения родства.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from family_canvas.constants import DEFAULT_LAYOUT, ZOOM_LIMITS, GENDER_MALE, GENDER_FEMALE
from family_canvas.edges import Edge, STYLE_ORTHOGONAL, route_edges
from family_canvas.layering import compute_depths
from family_canvas.layout import compute_layout
from family_canvas.models import FamilyGraph
from family_canvas.offsets import OffsetModel
from family_canvas.viewport import Viewport, content_bounds

logger = logging.getLogger(__name__)


@dataclass
class Scene:
    depths: Dict[str, int] = field(default_factory=dict)
    base_positions: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    positions: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    bounds: Optional[Tuple[float, float, float, float]] = None


def compute_scene(graph, offsets, config=DEFAULT_LAYOUT, base_positions=None, depths=None,
                  siblings=True, style=STYLE_ORTHOGONAL):
    """Позиции и линии для отрисовки. Ничего не меняет ни в графе, ни в смещениях."""
    if depths is None:
        depths, _ = compute_depths(graph)
    if base_positions is None:
        base_positions = compute_layout(graph, depths, config)
    positions = offsets.apply(base_positions)
    edges = route_edges(graph, positions, config, siblings=siblings, style=style)
    return Scene(
        depths=dict(depths),
        base_positions=dict(base_positions),
        positions=positions,
        edges=edges,
        bounds=content_bounds(positions, config),
    )


class FamilyDiagram:
    """
    Общее состояние окна: граф, смещения карточек, вид (сдвиг + масштаб), выбор.

    Изменение родства → пересчёт поколений и компоновки → перерисовка.
    Изменение смещений или вида → только перерисовка.
    """

    def __init__(self, config=DEFAULT_LAYOUT, zoom_limits=ZOOM_LIMITS):
        self.config = config
        self.graph = FamilyGraph()
        self.offsets = OffsetModel()
        self.viewport = Viewport(limits=zoom_limits)
        self.selected = None
        self.show_siblings = True
        self.edge_style = STYLE_ORTHOGONAL
        self.viewport_size = (0, 0)
        self._depths = {}
        self._base_positions = {}
        self._listeners = []

    # --- ПОДПИСКА НА ПЕРЕРИСОВКУ ---
    def subscribe(self, listener):
        self._listeners.append(listener)

    def notify(self):
        for listener in list(self._listeners):
            listener()

    def relayout(self):
        self._depths, _ = compute_depths(self.graph)
        self._base_positions = compute_layout(self.graph, self._depths, self.config)

    def _graph_changed(self):
        self.relayout()
        self.notify()

    # --- ДОСТУП ТОЛЬКО ДЛЯ ЧТЕНИЯ ---
    @property
    def transform(self):
        return self.viewport.transform

    @property
    def depths(self):
        return dict(self._depths)

    @property
    def base_positions(self):
        return dict(self._base_positions)

    def positions(self):
        return self.offsets.apply(self._base_positions)

    def snapshot(self):
        return self.graph.to_snapshot()

    def scene(self):
        return compute_scene(self.graph, self.offsets, self.config,
                             base_positions=self._base_positions, depths=self._depths,
                             siblings=self.show_siblings, style=self.edge_style)

    # --- ИЗМЕНЕНИЯ РОДСТВА ---
    def add_person(self, name, photo="", gender="", parent_a=None, parent_b=None, spouse=None):
        new_id, error = self.graph.add_person(name, photo, gender, parent_a, parent_b, spouse)
        if new_id is not None:
            self._graph_changed()
        return new_id, error

    def edit_person(self, pid, **fields):
        ok, message = self.graph.edit_person(pid, **fields)
        if ok:
            self._graph_changed()
        return ok, message

    def delete_person(self, pid):
        ok, message = self.graph.delete_person(pid)
        if ok:
            self.offsets.remove(pid)
            if self.selected == pid:
                self.selected = None
            self._graph_changed()
        return ok, message

    def add_spouse_link(self, person1_id, person2_id):
        ok, message = self.graph.add_spouse_link(person1_id, person2_id)
        if ok:
            self._graph_changed()
        return ok, message

    def remove_spouse_link(self, person1_id, person2_id):
        ok, message = self.graph.remove_spouse_link(person1_id, person2_id)
        if ok:
            self._graph_changed()
        return ok, message

    def load_snapshot(self, data, offsets=None):
        """Импорт целиком: либо всё дерево заменено, либо (False, причина) и ничего не тронуто."""
        ok, message = self.graph.load_snapshot(data)
        if not ok:
            logger.warning(f"Снимок отклонён: {message}")
            return ok, message
        self.offsets.load(offsets)
        self.offsets.prune(self.graph.order)
        if self.selected not in self.graph:
            self.selected = None
        self._graph_changed()
        return ok, message

    def new_tree(self):
        self.graph.clear()
        self.offsets.clear()
        self.selected = None
        self.viewport.reset()
        self._graph_changed()

    # --- ВИД И ВЫБОР ---
    def select(self, pid):
        self.selected = pid if pid in self.graph else None
        self.notify()

    def move_node(self, pid, ddx, ddy):
        """Сдвиг карточки в логических единицах."""
        if pid in self.graph:
            self.offsets.move_by(pid, ddx, ddy)
            self.notify()

    def reset_offset(self, pid):
        self.offsets.remove(pid)
        self.notify()

    def fit(self):
        width, height = self.viewport_size
        self.viewport.fit_to_bounds(self.positions(), width, height, self.config)
        self.notify()

    def reset_view(self):
        self.viewport.reset()
        self.notify()

    def print_fitted(self, print_fn):
        """Вписать → печать → вернуть прежний вид. Возвращает результат print_fn."""
        width, height = self.viewport_size

        def _print():
            self.notify()
            return print_fn()

        try:
            return self.viewport.print_fitted(self.positions(), width, height, _print, self.config)
        finally:
            self.notify()

    def seed_demo(self):
        """Демонстрационная семья: дедушка, бабушка, отец, мать и вы."""
        grandfather, _ = self.graph.add_person("Джузеппе (дедушка)", gender=GENDER_MALE)
        grandmother, _ = self.graph.add_person("Анна (бабушка)", gender=GENDER_FEMALE)
        self.graph.add_spouse_link(grandfather, grandmother)
        father, _ = self.graph.add_person("Марко (отец)", gender=GENDER_MALE,
                                          parent_a=grandfather, parent_b=grandmother)
        mother, _ = self.graph.add_person("Лючия (мать)", gender=GENDER_FEMALE, spouse=father)
        child, _ = self.graph.add_person("Ренато (вы)", gender=GENDER_MALE,
                                         parent_a=father, parent_b=mother)
        self.selected = child
        self._graph_changed()
        return child
