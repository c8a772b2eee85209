# -*- coding: utf-8 -*-
"""Семейный холст: компоновка родословного дерева, пан, масштаб и перетаскивание карточек."""

__version__ = "1.0.0"
