# -*- coding: utf-8 -*-
"""Модели данных: Person и FamilyGraph (персоны, родители, браки, снимок)."""

import logging

from family_canvas.constants import (
    GENDERS,
    GENDER_UNKNOWN,
    VALIDATION_MSG_NAME_REQUIRED,
    VALIDATION_MSG_GENDER_INVALID,
    VALIDATION_MSG_DUPLICATE_PARENTS,
    VALIDATION_MSG_TOO_MANY_PARENTS,
    VALIDATION_MSG_PARENT_UNKNOWN,
    VALIDATION_MSG_PARENT_SELF,
    MSG_ERROR_CANNOT_ADD_TO_SELF,
    MSG_ERROR_DUPLICATE_MARRIAGE,
    MSG_ERROR_MARRIAGE_NOT_FOUND,
    MSG_ERROR_PERSON_NOT_FOUND,
    MSG_ERROR_CYCLE,
    MSG_SUCCESS_MARRIAGE_ADDED,
    MSG_SUCCESS_MARRIAGE_REMOVED,
    MSG_SUCCESS_PERSON_DELETED,
    MSG_SUCCESS_PERSON_EDITED,
    MSG_SUCCESS_SNAPSHOT_LOADED,
    SNAPSHOT_MSG_NOT_DICT,
    SNAPSHOT_MSG_MISSING,
    SNAPSHOT_MSG_BAD_PEOPLE,
    SNAPSHOT_MSG_BAD_ORDER,
    SNAPSHOT_MSG_ORDER_UNKNOWN,
    SNAPSHOT_MSG_BAD_PERSON,
)

MAX_PARENTS = 2


def marriage_key(person1_id, person2_id):
    """Нормализованный ключ брака: (a, b) и (b, a) — одна и та же пара."""
    return tuple(sorted((str(person1_id), str(person2_id))))


class Person:
    """Модель одной персоны в семейном дереве."""

    def __init__(self, pid, name="", photo="", gender=GENDER_UNKNOWN, parents=None):
        self.id = str(pid)
        self.name = name
        self.photo = photo or ""
        self.gender = gender or GENDER_UNKNOWN
        self.parents = list(parents) if parents else []

    def display_name(self):
        return self.name or f"ID {self.id}"

    def has_photo(self):
        return bool(self.photo and self.photo.strip())

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "photo": self.photo,
            "gender": self.gender,
            "parents": list(self.parents),
        }


class FamilyGraph:
    """Граф семьи: персоны в порядке добавления, ссылки на родителей, браки."""

    def __init__(self):
        self.persons = {}
        self.order = []
        self.marriages = set()
        self.next_id = 1
        self.logger = logging.getLogger(__name__)
        self._modified = False

    def get_person(self, pid):
        return self.persons.get(pid)

    def get_all_persons(self):
        return self.persons

    def __len__(self):
        return len(self.order)

    def __contains__(self, pid):
        return pid in self.persons

    def iter_persons(self):
        """Персоны в порядке добавления (этот порядок определяет компоновку)."""
        for pid in self.order:
            person = self.persons.get(pid)
            if person is not None:
                yield person

    def children_of(self, pid):
        return [p.id for p in self.iter_persons() if pid in p.parents]

    def get_spouses(self, pid):
        """Супруги персоны в порядке добавления."""
        spouse_ids = set()
        for a, b in self.marriages:
            if a == pid:
                spouse_ids.add(b)
            elif b == pid:
                spouse_ids.add(a)
        return [sid for sid in self.order if sid in spouse_ids]

    def is_married(self, person1_id, person2_id):
        return marriage_key(person1_id, person2_id) in self.marriages

    # --- ВАЛИДАЦИЯ ---
    def _normalize_parents(self, parents):
        return [str(p) for p in parents if p not in (None, "")]

    def validate_person_data(self, name, gender, parents, pid=None, known_parents=()):
        """known_parents: уже записанные родители; их отсутствие в дереве не ошибка."""
        errors = []
        if not (name or "").strip():
            errors.append(VALIDATION_MSG_NAME_REQUIRED)
        if gender not in GENDERS:
            errors.append(VALIDATION_MSG_GENDER_INVALID)
        if len(parents) != len(set(parents)):
            errors.append(VALIDATION_MSG_DUPLICATE_PARENTS)
        if len(parents) > MAX_PARENTS:
            errors.append(VALIDATION_MSG_TOO_MANY_PARENTS)
        for parent_id in parents:
            if pid is not None and parent_id == pid:
                errors.append(VALIDATION_MSG_PARENT_SELF)
            elif parent_id not in self.persons and parent_id not in known_parents:
                errors.append(VALIDATION_MSG_PARENT_UNKNOWN.format(pid=parent_id))
        return len(errors) == 0, errors

    def creates_cycle(self, potential_parent_id, potential_child_id):
        visited = set()
        stack = [potential_parent_id]
        while stack:
            current_id = stack.pop()
            if current_id == potential_child_id:
                return True
            if current_id in visited:
                continue
            visited.add(current_id)
            current_person = self.persons.get(current_id)
            if current_person:
                stack.extend(current_person.parents)
        return False

    # --- МУТАЦИИ ---
    def add_person(self, name, photo="", gender=GENDER_UNKNOWN, parent_a=None, parent_b=None, spouse=None):
        parents = self._normalize_parents([parent_a, parent_b])
        gender = gender or GENDER_UNKNOWN
        is_valid, errors = self.validate_person_data(name, gender, parents)
        if spouse not in (None, "") and str(spouse) not in self.persons:
            errors.append(MSG_ERROR_PERSON_NOT_FOUND)
            is_valid = False
        if not is_valid:
            return None, "\n".join(errors)
        new_id = str(self.next_id)
        self.next_id += 1
        new_person = Person(new_id, name=name.strip(), photo=(photo or "").strip(),
                            gender=gender, parents=parents)
        self.persons[new_id] = new_person
        self.order.append(new_id)
        if spouse not in (None, ""):
            self.marriages.add(marriage_key(new_id, spouse))
        self.mark_modified()
        self.logger.info(f"Добавлена персона: {new_person.display_name()} (ID: {new_id})")
        return new_id, None

    def edit_person(self, pid, **fields):
        """Меняет name/photo/gender/parents. Неизвестные поля игнорируются."""
        person = self.persons.get(pid)
        if person is None:
            return False, MSG_ERROR_PERSON_NOT_FOUND
        name = fields.get("name", person.name)
        photo = fields.get("photo", person.photo)
        gender = fields.get("gender", person.gender) or GENDER_UNKNOWN
        if "parents" in fields:
            parents = self._normalize_parents(fields["parents"] or [])
        else:
            parents = list(person.parents)
        is_valid, errors = self.validate_person_data(name, gender, parents, pid=pid,
                                                    known_parents=person.parents)
        if not is_valid:
            return False, "\n".join(errors)
        for parent_id in parents:
            if parent_id not in person.parents and self.creates_cycle(parent_id, pid):
                return False, MSG_ERROR_CYCLE
        person.name = name.strip()
        person.photo = (photo or "").strip()
        person.gender = gender
        person.parents = parents
        self.mark_modified()
        self.logger.info(f"Изменена персона: {person.display_name()} (ID: {pid})")
        return True, MSG_SUCCESS_PERSON_EDITED

    def delete_person(self, pid):
        if pid not in self.persons:
            return False, MSG_ERROR_PERSON_NOT_FOUND
        person = self.persons.pop(pid)
        self.order = [other for other in self.order if other != pid]
        for other in self.persons.values():
            if pid in other.parents:
                other.parents = [p for p in other.parents if p != pid]
        self.marriages = {m for m in self.marriages if pid not in m}
        self.mark_modified()
        self.logger.info(f"Удалена персона: {person.display_name()} (ID: {pid})")
        return True, MSG_SUCCESS_PERSON_DELETED

    def add_spouse_link(self, person1_id, person2_id):
        if person1_id == person2_id:
            return False, MSG_ERROR_CANNOT_ADD_TO_SELF
        if person1_id not in self.persons or person2_id not in self.persons:
            return False, MSG_ERROR_PERSON_NOT_FOUND
        key = marriage_key(person1_id, person2_id)
        if key in self.marriages:
            return False, MSG_ERROR_DUPLICATE_MARRIAGE
        self.marriages.add(key)
        self.mark_modified()
        self.logger.info(f"Брак добавлен: {key[0]} — {key[1]}")
        return True, MSG_SUCCESS_MARRIAGE_ADDED

    def remove_spouse_link(self, person1_id, person2_id):
        key = marriage_key(person1_id, person2_id)
        if key not in self.marriages:
            return False, MSG_ERROR_MARRIAGE_NOT_FOUND
        self.marriages.discard(key)
        self.mark_modified()
        self.logger.info(f"Брак удален: {key[0]} — {key[1]}")
        return True, MSG_SUCCESS_MARRIAGE_REMOVED

    def clear(self):
        self.persons = {}
        self.order = []
        self.marriages = set()
        self.next_id = 1
        self.mark_modified()

    # --- СНИМОК (для импорта/экспорта и хранения) ---
    def to_snapshot(self):
        return {
            "people": {pid: p.to_dict() for pid, p in self.persons.items()},
            "spouses": [list(m) for m in sorted(self.marriages)],
            "order": list(self.order),
            "nextId": self.next_id,
        }

    def load_snapshot(self, data):
        """
        Полностью заменяет модель снимком. При ошибке формата модель не меняется
        и возвращается (False, причина).
        """
        if not isinstance(data, dict):
            return False, SNAPSHOT_MSG_NOT_DICT
        for field_name in ("people", "order"):
            if field_name not in data:
                return False, SNAPSHOT_MSG_MISSING.format(field=field_name)
        people_raw = data["people"]
        order_raw = data["order"]
        if not isinstance(people_raw, dict):
            return False, SNAPSHOT_MSG_BAD_PEOPLE
        if not isinstance(order_raw, list):
            return False, SNAPSHOT_MSG_BAD_ORDER

        persons = {}
        for key, pdata in people_raw.items():
            pid = str(key)
            if not isinstance(pdata, dict):
                return False, SNAPSHOT_MSG_BAD_PERSON.format(pid=pid, reason="не объект")
            if "name" not in pdata or not isinstance(pdata["name"], str):
                return False, SNAPSHOT_MSG_BAD_PERSON.format(pid=pid, reason="нет имени")
            if "id" in pdata and str(pdata["id"]) != pid:
                return False, SNAPSHOT_MSG_BAD_PERSON.format(pid=pid, reason="id не совпадает с ключом")
            parents_raw = pdata.get("parents") or []
            if not isinstance(parents_raw, list):
                return False, SNAPSHOT_MSG_BAD_PERSON.format(pid=pid, reason="parents не список")
            parents = []
            for parent_id in self._normalize_parents(parents_raw):
                if parent_id not in parents and parent_id != pid:
                    parents.append(parent_id)
            if len(parents) > MAX_PARENTS:
                return False, SNAPSHOT_MSG_BAD_PERSON.format(pid=pid, reason="больше двух родителей")
            photo = pdata.get("photo") or ""
            if not isinstance(photo, str):
                return False, SNAPSHOT_MSG_BAD_PERSON.format(pid=pid, reason="photo не строка")
            gender = pdata.get("gender") or GENDER_UNKNOWN
            if gender not in GENDERS:
                gender = GENDER_UNKNOWN
            persons[pid] = Person(pid, name=pdata["name"], photo=photo,
                                  gender=gender, parents=parents)

        order = []
        for raw_id in order_raw:
            pid = str(raw_id)
            if pid not in persons:
                return False, SNAPSHOT_MSG_ORDER_UNKNOWN.format(pid=pid)
            if pid not in order:
                order.append(pid)
        for pid in persons:
            if pid not in order:
                order.append(pid)

        marriages = set()
        for pair in data.get("spouses") or []:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                continue
            a, b = str(pair[0]), str(pair[1])
            if a == b or a not in persons or b not in persons:
                continue
            marriages.add(marriage_key(a, b))

        numeric_ids = []
        for pid in persons:
            try:
                numeric_ids.append(int(pid))
            except (ValueError, TypeError):
                pass
        next_id = max(numeric_ids, default=0) + 1
        given = data.get("nextId")
        if isinstance(given, int) and not isinstance(given, bool) and given > next_id:
            next_id = given

        self.persons = persons
        self.order = order
        self.marriages = marriages
        self.next_id = next_id
        self.clear_modified_flag()
        self.logger.info(f"Загружен снимок: {len(persons)} персон, {len(marriages)} браков")
        return True, MSG_SUCCESS_SNAPSHOT_LOADED

    def mark_modified(self):
        self._modified = True

    def clear_modified_flag(self):
        self._modified = False

    @property
    def modified(self):
        return self._modified
