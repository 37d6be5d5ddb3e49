"""
Normalización de valores de celda por tipo semántico.

Todas las funciones son totales: ante un valor desconocido devuelven un
valor canónico de respaldo (``Unspecified``, ``None`` para booleanos no
comparables, la primera variante permitida para íconos).
"""
import re
from typing import List, Optional, Sequence

UNSPECIFIED = "Unspecified"

STATUS_VOCABULARY = (
    "Critical", "Error", "High", "Medium", "Low", "Very Low", "Unresponsive",
    "Bad", "Poor", "Inactive", "Not Monitored", "Idle", "Healthy", "Good", "Online",
)

# Menor rango = más severo (va primero en orden ascendente)
STATUS_RANK = {
    "Critical": 0, "Error": 0, "High": 1, "Medium": 2, "Low": 3, "Very Low": 4,
    "Unresponsive": 5, "Bad": 6, "Poor": 7, "Inactive": 8, "Not Monitored": 9,
    "Idle": 10, "Healthy": 11, "Good": 12, "Online": 13, UNSPECIFIED: 14,
}
UNKNOWN_STATUS_RANK = 999

_STATUS_LOOKUP = {name.lower(): name for name in STATUS_VOCABULARY}
_STATUS_SYNONYMS = {
    "critival": "critical",
    "verylow": "very low",
    "not responding": "unresponsive",
    "unmonitored": "not monitored",
    "notmonitored": "not monitored",
}

TRUTHY = frozenset(("true", "yes", "y", "1"))
FALSY = frozenset(("false", "no", "n", "0"))

_TOKEN_SPLIT = re.compile(r"[,|]")
_SEPARATORS = re.compile(r"[_-]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")

_ICON_SYNONYMS = {
    "onpremise": "onprem",
    "onpremises": "onprem",
    "saas": "cloud",
    "critival": "critical",
}
_ICON_AXIS_NAMES = ("icon", "name", "type", "category", "state", "level", "platform")


def split_tags(raw: Optional[str]) -> List[str]:
    return [t.strip() for t in _TOKEN_SPLIT.split(raw or "") if t.strip()]


def first_token(raw: Optional[str]) -> str:
    tags = split_tags(raw)
    return tags[0] if tags else ""


def normalize_status(raw: Optional[str]) -> str:
    s = _SEPARATORS.sub(" ", first_token(raw).lower())
    s = " ".join(s.split())
    s = _STATUS_SYNONYMS.get(s, s)
    return _STATUS_LOOKUP.get(s, UNSPECIFIED)


def status_rank(raw: Optional[str]) -> int:
    return STATUS_RANK.get(normalize_status(raw), UNKNOWN_STATUS_RANK)


def parse_boolean(raw: Optional[str]) -> Optional[bool]:
    """True/False si el valor es booleano; None si no es comparable."""
    v = (raw or "").strip().lower()
    if v in TRUTHY:
        return True
    if v in FALSY:
        return False
    return None


def boolean_display_value(raw: Optional[str]) -> bool:
    # El renderizador necesita un valor: lo no reconocido se pinta como falso
    return parse_boolean(raw) is True


def canonical_token(value: str) -> str:
    c = _NON_ALNUM.sub("", (value or "").lower())
    return _ICON_SYNONYMS.get(c, c)


def resolve_icon_variant(raw: Optional[str], allowed: Sequence[str]) -> str:
    """
    Resuelve un valor crudo a una variante legal:
      1) coincidencia exacta sin mayúsculas
      2) coincidencia canónica (sin espacios/puntuación, sinónimos)
      3) primera variante permitida
    """
    raw = raw or ""
    if not allowed:
        return raw

    raw_lower = raw.strip().lower()
    for value in allowed:
        if value.strip().lower() == raw_lower:
            return value

    raw_canon = canonical_token(raw)
    for value in allowed:
        if canonical_token(value) == raw_canon:
            return value

    return allowed[0]


def pick_variant_axis(axes: Sequence[str]) -> Optional[str]:
    if not axes:
        return None
    for axis in axes:
        if axis.lower() in _ICON_AXIS_NAMES:
            return axis
    return axes[0]


def link_text(raw: Optional[str]) -> str:
    return (raw or "").strip()
