from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pytest

from models.table_model import SemanticKind
from services.host_interfaces import PropertyInfo, TextStyle, TokenRole

CHAR_WIDTHS = {TextStyle.HEADER: 8.0, TextStyle.BODY: 7.0, TextStyle.CHIP: 6.0}


class FakeOracle:
    """Ancho = caracteres x ancho fijo por estilo."""

    def __init__(self, representative: Optional[Dict[SemanticKind, Optional[float]]] = None, fail_on: str = None):
        self.representative = representative or {}
        self.fail_on = fail_on
        self.text_calls: List[tuple] = []
        self.representative_calls: List[tuple] = []

    def measure_text(self, value: str, style: TextStyle) -> float:
        if self.fail_on is not None and value == self.fail_on:
            raise RuntimeError("render host crashed")
        self.text_calls.append((value, style))
        return len(value) * CHAR_WIDTHS[style]

    def measure_representative(self, kind: SemanticKind, canonical_value: Optional[str]) -> Optional[float]:
        self.representative_calls.append((kind, canonical_value))
        value = self.representative.get(kind)
        if isinstance(value, Exception):
            raise value
        return value


class FakeComponent:
    def __init__(self, key: str, properties: Optional[Dict[str, PropertyInfo]] = None,
                 axes: Optional[Dict[str, List[str]]] = None):
        self.key = key
        self._properties = properties or {}
        self._axes = axes or {}

    def properties(self):
        return dict(self._properties)

    def variant_axes(self):
        return dict(self._axes)


class FakeResolver:
    def __init__(self, components: Optional[Dict[str, FakeComponent]] = None, failing: Iterable[str] = ()):
        self.components = components or {}
        self.failing = set(failing)
        self.calls: List[str] = []

    def resolve(self, key: str):
        self.calls.append(key)
        if key in self.failing:
            raise RuntimeError(f"import failed for {key}")
        return self.components.get(key)


class FakeVariables:
    def resolve(self, role: TokenRole):
        return f"token:{role.value}"


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def make_oracle():
    return FakeOracle


@pytest.fixture
def make_component():
    return FakeComponent


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def variables() -> FakeVariables:
    return FakeVariables()


@pytest.fixture
def design_system() -> FakeResolver:
    """Resolvedor con todos los componentes del sistema de diseño."""
    return FakeResolver({
        "chip": FakeComponent("chip"),
        "status": FakeComponent("status", {"status": PropertyInfo("VARIANT", "Unspecified")}),
        "boolean": FakeComponent("boolean", {"boolean": PropertyInfo("VARIANT", "true")}),
        "icon": FakeComponent(
            "icon",
            {"Type": PropertyInfo("VARIANT", "Cloud"), "Size": PropertyInfo("VARIANT", "24"),
             "Label": PropertyInfo("TEXT", "x")},
            {"Size": ["16", "24"], "Type": ["On Prem", "Cloud"]},
        ),
        "checkbox": FakeComponent("checkbox"),
        "card_header": FakeComponent("card_header"),
        "nav": FakeComponent("nav"),
        "filter_bar": FakeComponent("filter_bar"),
    })
