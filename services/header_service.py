import re
from typing import Iterable, List

from models.table_model import Alignment, Column, SemanticKind

_TAG_GROUP = re.compile(r"\[([^\]]*)\]")
_TAG_GROUP_WITH_SPACE = re.compile(r"\s*\[[^\]]*\]\s*")
_TOKEN_SPLIT = re.compile(r"[|,\s]+")

# Orden fijo de precedencia cuando un encabezado trae varias etiquetas
SEMANTIC_TOKENS = (
    (SemanticKind.CHIPS, ("chip", "chips")),
    (SemanticKind.STATUS, ("status",)),
    (SemanticKind.BOOLEAN, ("boolean", "bool")),
    (SemanticKind.ICON, ("icon",)),
    (SemanticKind.LINK, ("link",)),
)

ALIGNMENT_TOKENS = (
    (Alignment.RIGHT, ("r", "right")),
    (Alignment.CENTER, ("c", "center", "centre")),
    (Alignment.LEFT, ("l", "left")),
)


def header_tokens(raw_header: str) -> List[str]:
    """Tokens en minúscula de todos los grupos [..] del encabezado."""
    tokens = []
    for group in _TAG_GROUP.findall(raw_header or ""):
        tokens.extend(t for t in _TOKEN_SPLIT.split(group.strip().lower()) if t)
    return tokens


def display_label(raw_header: str) -> str:
    label = _TAG_GROUP_WITH_SPACE.sub(" ", raw_header or "")
    # Corchetes sin cerrar quedan como texto
    return " ".join(label.split())


def parse_header(raw_header: str) -> Column:
    tokens = set(header_tokens(raw_header))

    kind = SemanticKind.PLAIN
    for candidate, aliases in SEMANTIC_TOKENS:
        if tokens.intersection(aliases):
            kind = candidate
            break

    alignment = Alignment.LEFT
    for candidate, aliases in ALIGNMENT_TOKENS:
        if tokens.intersection(aliases):
            alignment = candidate
            break

    return Column(
        raw_header=raw_header,
        display_label=display_label(raw_header),
        semantic_kind=kind,
        alignment=alignment,
    )


def parse_headers(raw_headers: Iterable[str]) -> List[Column]:
    return [parse_header(h) for h in raw_headers]
