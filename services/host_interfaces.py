"""
Contratos con el host que materializa la tabla.

El núcleo nunca importa nada del host: recibe un oráculo de medición, un
resolvedor de componentes y una fuente de variables (tokens de color).
Toda llamada externa pasa por ``fetch_resource``, que convierte una falla
en ``ImportFailure`` en vez de propagarla.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Protocol, TypeVar

from models.layout_config import DEFAULT_KEYS, DesignSystemKeys
from models.table_model import SemanticKind
from services.value_normalizer import pick_variant_axis, resolve_icon_variant

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TextStyle(str, Enum):
    HEADER = "header"   # Inter Medium 14/24
    BODY = "body"       # Inter Regular 12/20
    CHIP = "chip"       # Inter Regular 11/16


class TokenRole(str, Enum):
    TEXT = "text"
    DIVIDER = "divider"
    LINK = "link"
    CARD_BACKGROUND = "card_background"
    CARD_BORDER = "card_border"


@dataclass(frozen=True)
class PropertyInfo:
    type: str
    value: Any = None


class ComponentHandle(Protocol):
    key: str

    def properties(self) -> Mapping[str, PropertyInfo]:
        """Propiedades mutables de una instancia (consulta de capacidades)."""
        ...

    def variant_axes(self) -> Mapping[str, List[str]]:
        """Ejes de variante del conjunto y sus valores permitidos."""
        ...


class MeasurementOracle(Protocol):
    def measure_text(self, value: str, style: TextStyle) -> float:
        ...

    def measure_representative(self, kind: SemanticKind, canonical_value: Optional[str]) -> Optional[float]:
        ...


class ComponentResolver(Protocol):
    def resolve(self, key: str) -> Optional[ComponentHandle]:
        ...


class VariableSource(Protocol):
    def resolve(self, role: TokenRole) -> Optional[Any]:
        ...


class NullComponentResolver:
    """Host sin sistema de diseño: todo cae al renderizado de respaldo."""

    def resolve(self, key: str) -> Optional[ComponentHandle]:
        return None


class NullVariableSource:
    def resolve(self, role: TokenRole) -> Optional[Any]:
        return None


@dataclass(frozen=True)
class ImportFailure:
    resource: str
    reason: str


@dataclass(frozen=True)
class ImportResult(Generic[T]):
    value: Optional[T] = None
    failure: Optional[ImportFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.value is not None

    def or_none(self) -> Optional[T]:
        return self.value if self.failure is None else None


def fetch_resource(resource: str, loader: Callable[[], Optional[T]]) -> ImportResult[T]:
    try:
        value = loader()
    except Exception as e:  # el host puede fallar de cualquier forma
        logger.warning("Recurso '%s' no disponible: %s", resource, e)
        return ImportResult(failure=ImportFailure(resource, str(e)))
    if value is None:
        logger.debug("Recurso '%s' no resuelto, se usa respaldo", resource)
        return ImportResult(failure=ImportFailure(resource, "not found"))
    return ImportResult(value=value)


@dataclass
class TableResources:
    """Referencias opcionales; cualquier campo puede ser None."""

    components: Dict[str, ComponentHandle] = field(default_factory=dict)
    tokens: Dict[TokenRole, Any] = field(default_factory=dict)
    keys: DesignSystemKeys = DEFAULT_KEYS

    def component(self, key: str) -> Optional[ComponentHandle]:
        return self.components.get(key)

    def token(self, role: TokenRole) -> Optional[Any]:
        return self.tokens.get(role)

    def component_for_kind(self, kind: SemanticKind) -> Optional[ComponentHandle]:
        key = {
            SemanticKind.CHIPS: self.keys.chip,
            SemanticKind.STATUS: self.keys.status,
            SemanticKind.BOOLEAN: self.keys.boolean,
            SemanticKind.ICON: self.keys.icon,
        }.get(kind)
        return self.component(key) if key else None


class ResourceCatalog:
    @staticmethod
    def load(resolver: Optional[ComponentResolver], variables: Optional[VariableSource],
             keys: DesignSystemKeys = DEFAULT_KEYS) -> TableResources:
        resources = TableResources(keys=keys)
        if resolver is not None:
            for key in (keys.chip, keys.status, keys.boolean, keys.icon,
                        keys.checkbox, keys.card_header, keys.nav, keys.filter_bar):
                result = fetch_resource(f"component:{key}", lambda k=key: resolver.resolve(k))
                if result.ok:
                    resources.components[key] = result.value
        if variables is not None:
            for role in TokenRole:
                result = fetch_resource(f"variable:{role.value}", lambda r=role: variables.resolve(r))
                if result.ok:
                    resources.tokens[role] = result.value
        return resources


def component_properties(component: Optional[ComponentHandle]) -> Mapping[str, PropertyInfo]:
    if component is None:
        return {}
    result = fetch_resource(f"properties:{getattr(component, 'key', '?')}", component.properties)
    return result.or_none() or {}


def component_variant_axes(component: Optional[ComponentHandle]) -> Mapping[str, List[str]]:
    if component is None:
        return {}
    result = fetch_resource(f"variants:{getattr(component, 'key', '?')}", component.variant_axes)
    return result.or_none() or {}


def icon_variant_selection(component: Optional[ComponentHandle], raw: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Valores de variante a fijar en una instancia de ícono: el eje elegido
    recibe el valor resuelto y los demás ejes conservan su valor actual.
    None si el componente no expone ejes.
    """
    axes = component_variant_axes(component)
    axis = pick_variant_axis(list(axes))
    if axis is None:
        return None
    allowed = list(axes.get(axis) or [])
    if raw is None:
        if not allowed:
            return None
        value = allowed[0]
    else:
        value = resolve_icon_variant(raw, allowed)

    selection = {
        name: info.value
        for name, info in component_properties(component).items()
        if info.type == "VARIANT" and isinstance(info.value, str)
    }
    selection[axis] = value
    return selection
