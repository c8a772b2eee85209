# -*- coding: utf-8 -*-
"""Ручные смещения карточек поверх вычисленной компоновки."""


class OffsetModel:
    """
    Смещение (dx, dy) в логических единицах для каждой персоны.
    Базовые позиции никогда не меняются: итоговая позиция = база + смещение.
    """

    def __init__(self):
        self._offsets = {}

    def __contains__(self, pid):
        return pid in self._offsets

    def __len__(self):
        return len(self._offsets)

    def get(self, pid):
        return self._offsets.get(pid, (0.0, 0.0))

    def set(self, pid, dx, dy):
        self._offsets[pid] = (float(dx), float(dy))

    def move_by(self, pid, ddx, ddy):
        if pid not in self._offsets:
            self._offsets[pid] = (0.0, 0.0)
        dx, dy = self._offsets[pid]
        self._offsets[pid] = (dx + ddx, dy + ddy)

    def remove(self, pid):
        self._offsets.pop(pid, None)

    def clear(self):
        self._offsets.clear()

    def prune(self, valid_ids):
        """Удаляет смещения персон, которых больше нет в дереве."""
        valid_ids = set(valid_ids)
        for pid in [pid for pid in self._offsets if pid not in valid_ids]:
            del self._offsets[pid]

    def final_position(self, pid, base):
        dx, dy = self.get(pid)
        return base[0] + dx, base[1] + dy

    def apply(self, base_positions):
        return {pid: self.final_position(pid, base) for pid, base in base_positions.items()}

    def to_dict(self):
        return {pid: {"dx": dx, "dy": dy} for pid, (dx, dy) in self._offsets.items()}

    def load(self, data):
        """Загружает смещения из словаря {pid: {dx, dy}}; битые записи пропускаются."""
        self._offsets = {}
        for pid, value in (data or {}).items():
            try:
                self.set(str(pid), value.get("dx", 0), value.get("dy", 0))
            except (AttributeError, TypeError, ValueError):
                continue
