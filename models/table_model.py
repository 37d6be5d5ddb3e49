from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from models.composition_model import CompositionNode

Row = Dict[str, str]


class SemanticKind(str, Enum):
    PLAIN = "plain"
    CHIPS = "chips"
    STATUS = "status"
    BOOLEAN = "boolean"
    ICON = "icon"
    LINK = "link"


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"
    NONE = "none"


@dataclass(frozen=True)
class Column:
    """Columna derivada de un encabezado anotado. Inmutable por solicitud."""

    raw_header: str
    display_label: str
    semantic_kind: SemanticKind = SemanticKind.PLAIN
    alignment: Alignment = Alignment.LEFT


@dataclass(frozen=True)
class SortState:
    by: Optional[str] = None
    direction: SortDirection = SortDirection.NONE

    @classmethod
    def none(cls) -> "SortState":
        return cls(None, SortDirection.NONE)

    @property
    def is_active(self) -> bool:
        return self.by is not None and self.direction in (SortDirection.ASCENDING, SortDirection.DESCENDING)

    def is_sorted_by(self, header: str) -> bool:
        return self.is_active and self.by == header

    def cycle(self, header: str) -> "SortState":
        # Ciclo del selector: otra columna -> asc -> desc -> sin orden
        if self.by != header or self.direction == SortDirection.NONE:
            return SortState(header, SortDirection.ASCENDING)
        if self.direction == SortDirection.ASCENDING:
            return SortState(header, SortDirection.DESCENDING)
        return SortState.none()


@dataclass
class SizingResult:
    """Ancho requerido por índice de columna (sin padding) + ancho total."""

    widths: Dict[int, int] = field(default_factory=dict)
    table_width: int = 0

    def width_for(self, index: int) -> int:
        return self.widths.get(index, 0)


@dataclass(frozen=True)
class GenerationOptions:
    include_checkboxes: bool = True
    place_within_card: bool = True
    place_within_page: bool = False
    card_shadow: bool = True
    include_card_header: bool = True
    include_filter_bar: bool = True
    row_limit: int = 50
    file_name: str = "Table"


@dataclass
class GenerationRequest:
    """Todo lo que necesita una generación; no hay estado global."""

    columns: List[str]
    rows: List[Row]
    sort_state: SortState = field(default_factory=SortState.none)
    options: GenerationOptions = field(default_factory=GenerationOptions)


@dataclass
class GenerationResult:
    root: "CompositionNode"
    sort_state: SortState
    columns: List[Column]
    rows: List[Row]
    sizing: SizingResult
