# -*- coding: utf-8 -*-
"""Вспомогательные функции для построения форм UI и списков выбора персон."""

import base64
import binascii
import os
import tkinter as tk
from tkinter import ttk

NO_PERSON_LABEL = "(нет)"


def create_form_fields(parent, fields_config):
    """
    Создаёт поля формы на основе конфигурации.
    fields_config: список кортежей (label, widget_type, default_value, widget_kwargs)
    Возвращает (widgets, last_row); для Entry/Combobox/Radiobutton — StringVar.
    """
    widgets = {}
    row = 0

    for label, widget_type, default_val, kwargs in fields_config:
        ttk.Label(parent, text=label).grid(row=row, column=0, padx=10, pady=8, sticky='e')
        var = tk.StringVar(value="" if default_val is None else str(default_val))

        if widget_type == "Entry":
            entry = ttk.Entry(parent, width=30, textvariable=var, **kwargs)
            entry.grid(row=row, column=1, padx=10, pady=8, sticky='w')

        elif widget_type == "Radiobutton":
            values = kwargs.get("values", [])
            labels = kwargs.get("labels", {})
            rb_frame = ttk.Frame(parent)
            rb_frame.grid(row=row, column=1, padx=10, pady=8, sticky='w')
            for i, val in enumerate(values):
                rb = ttk.Radiobutton(rb_frame, text=labels.get(val, val), variable=var, value=val)
                rb.grid(row=0, column=i, padx=5, sticky='w')

        elif widget_type == "Combobox":
            combo = ttk.Combobox(parent, textvariable=var, values=kwargs.get("values", []),
                                 state=kwargs.get("state", "readonly"), width=28)
            combo.grid(row=row, column=1, padx=10, pady=8, sticky='w')

        else:
            raise ValueError(f"Неизвестный тип поля: {widget_type}")

        widgets[label] = var
        row += 1

    return widgets, row


def person_choices(graph, exclude=None):
    """Подписи для выпадающих списков: «(нет)» и затем «Имя [id]» в порядке добавления."""
    choices = [NO_PERSON_LABEL]
    for person in graph.iter_persons():
        if person.id == exclude:
            continue
        choices.append(choice_label(person))
    return choices


def choice_label(person):
    return f"{person.display_name()} [{person.id}]"


def parse_choice(label):
    """Обратное к choice_label: id из «Имя [id]» или None."""
    if not label or label == NO_PERSON_LABEL:
        return None
    if label.endswith("]") and "[" in label:
        return label[label.rindex("[") + 1:-1] or None
    return None


def photo_source(photo):
    """
    Откуда брать фото: ("path", путь), ("bytes", данные из base64 / data URL)
    или None, если фото нет или оно не читается.
    """
    if not photo or not photo.strip():
        return None
    photo = photo.strip()
    if os.path.exists(photo):
        return "path", photo
    if photo.startswith("data:"):
        header, _, payload = photo.partition(",")
        if ";base64" not in header:
            return None
        photo = payload
    try:
        return "bytes", base64.b64decode(photo, validate=True)
    except (binascii.Error, ValueError):
        return None
