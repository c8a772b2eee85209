# -*- coding: utf-8 -*-
"""
Компоновка по поколениям.

Каждое поколение — отдельный ряд. Внутри ряда персоны раскладываются слева
направо по слотам в порядке добавления; супруги из одного ряда становятся
парой и делят один широкий слот. Затем каждый ребёнок сдвигается под
середину своих родителей. Координаты — левый верхний угол карточки.
"""

import logging

from family_canvas.constants import DEFAULT_LAYOUT
from family_canvas.layering import compute_depths, group_by_level

logger = logging.getLogger(__name__)


def build_units(graph, level_ids):
    """
    Жадно разбивает ряд на единицы: пара (pid, spouse_id) или одиночка (pid,).
    Партнёр — первый по порядку добавления супруг из этого же ряда, ещё не
    занятый в другой паре.
    """
    level_set = set(level_ids)
    placed = set()
    units = []
    for pid in level_ids:
        if pid in placed:
            continue
        partner = next((sid for sid in graph.get_spouses(pid)
                        if sid in level_set and sid not in placed and sid != pid), None)
        if partner is not None:
            units.append((pid, partner))
            placed.update((pid, partner))
        else:
            units.append((pid,))
            placed.add(pid)
    return units


def couple_slot_width(config):
    """Слот пары: две карточки через couple_gap и те же поля по краям, что у одиночного слота."""
    return config.slot_width + config.card_width + config.couple_gap


def _place_units(units, y, config, positions):
    half_pair = (config.card_width + config.couple_gap) / 2
    half_card = config.card_width / 2
    cursor = 0.0
    for unit in units:
        width = couple_slot_width(config) if len(unit) == 2 else config.slot_width
        center = cursor + width / 2
        if len(unit) == 2:
            left, right = unit
            positions[left] = (center - half_pair - half_card, y)
            positions[right] = (center + half_pair - half_card, y)
        else:
            positions[unit[0]] = (center - half_card, y)
        cursor += width


def compute_layout(graph, depths=None, config=DEFAULT_LAYOUT):
    """Базовые позиции {pid: (x, y)}. Чистая функция: граф не меняется."""
    if depths is None:
        depths, _ = compute_depths(graph)
    by_level = group_by_level(graph, depths)
    positions = {}

    for level in sorted(by_level):
        units = build_units(graph, by_level[level])
        _place_units(units, level * config.level_gap, config, positions)

    # Дети под серединой родителей; ряды сверху вниз, чтобы внуки видели
    # уже сдвинутых родителей.
    for level in sorted(by_level):
        for pid in by_level[level]:
            person = graph.get_person(pid)
            xs = [positions[p][0] for p in person.parents if p in positions]
            if xs:
                positions[pid] = (sum(xs) / len(xs), positions[pid][1])

    if positions:
        min_x = min(x for x, _ in positions.values())
        if min_x < 0:
            positions = {pid: (x - min_x, y) for pid, (x, y) in positions.items()}

    logger.debug(f"Компоновка: {len(positions)} персон, {len(by_level)} поколений")
    return {pid: positions[pid] for pid in graph.order if pid in positions}
