# -*- coding: utf-8 -*-
import pytest

from family_canvas.models import FamilyGraph
from family_canvas.scene import FamilyDiagram


@pytest.fixture
def graph():
    return FamilyGraph()


@pytest.fixture
def couple_graph():
    """Супруги A и B и их ребёнок C."""
    g = FamilyGraph()
    a, _ = g.add_person("A")
    b, _ = g.add_person("B")
    g.add_spouse_link(a, b)
    g.add_person("C", parent_a=a, parent_b=b)
    return g


@pytest.fixture
def diagram():
    d = FamilyDiagram()
    d.viewport_size = (800, 600)
    return d
