# -*- coding: utf-8 -*-
"""Поколения: глубина каждой персоны по графу «родитель → ребёнок»."""

import collections
import logging

logger = logging.getLogger(__name__)


def compute_depths(graph):
    """
    Возвращает (depth, children).

    depth[pid] = 0 для персон без родителей, иначе 1 + max(depth родителей).
    Обход по Кану: ребёнок встаёт в очередь, когда обработаны все его родители.
    Ссылки на несуществующих родителей не считаются. Персоны, до которых обход
    не дошёл (цикл в родстве), сохраняют уже найденную глубину, а без неё
    получают 0; исключение не бросается.
    """
    persons = graph.get_all_persons()
    indeg = {}
    depth = {}
    children = {}
    for person in graph.iter_persons():
        indeg[person.id] = sum(1 for p in person.parents if p in persons)
        children[person.id] = []
    for person in graph.iter_persons():
        for parent_id in person.parents:
            if parent_id in children:
                children[parent_id].append(person.id)

    queue = collections.deque()
    for pid in indeg:
        if indeg[pid] == 0:
            depth[pid] = 0
            queue.append(pid)
    while queue:
        u = queue.popleft()
        for v in children[u]:
            depth[v] = max(depth.get(v, 0), depth[u] + 1)
            indeg[v] -= 1
            if indeg[v] == 0:
                queue.append(v)

    unreached = [pid for pid in indeg if indeg[pid] > 0]
    if unreached:
        logger.warning(f"Цикл в родственных связях, частичная глубина для: {', '.join(unreached)}")
        for pid in unreached:
            depth.setdefault(pid, 0)
    return depth, children


def group_by_level(graph, depth):
    """Уровень → список id в порядке добавления."""
    by_level = {}
    for person in graph.iter_persons():
        by_level.setdefault(depth.get(person.id, 0), []).append(person.id)
    return by_level
