from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class NodeKind(str, Enum):
    # Hojas
    TEXT = "text"
    BADGE = "badge"
    TAG = "tag"
    TAG_GROUP = "tag_group"
    ICON = "icon"
    CHECKBOX = "checkbox"
    SORT_INDICATOR = "sort_indicator"
    DIVIDER = "divider"
    # Contenedores
    CELL = "cell"
    ROW = "row"
    TABLE = "table"
    FIXED_COLUMN = "fixed_column"
    SELECTABLE_TABLE = "selectable_table"
    CARD = "card"
    CARD_HEADER = "card_header"
    PAGE = "page"
    NAV_RAIL = "nav_rail"
    CONTENT = "content"
    FILTER_BAR = "filter_bar"
    TITLE = "title"


@dataclass
class LayoutHints:
    """Semántica de estirado que el host respeta al materializar."""

    direction: str = "vertical"
    grow: bool = False
    stretch: bool = False
    scroll: bool = False
    gap: int = 0


@dataclass
class CompositionNode:
    """
    Nodo del árbol de composición. Árbol estricto: cada nodo tiene
    un solo padre y se construye de abajo hacia arriba.
    """

    kind: NodeKind
    name: str
    children: List["CompositionNode"] = field(default_factory=list)
    props: Dict[str, Any] = field(default_factory=dict)
    width: Optional[int] = None
    height: Optional[int] = None
    layout: LayoutHints = field(default_factory=LayoutHints)

    def append(self, child: "CompositionNode") -> "CompositionNode":
        self.children.append(child)
        return child

    def children_of_kind(self, kind: NodeKind) -> List["CompositionNode"]:
        return [c for c in self.children if c.kind == kind]

    def walk(self) -> Iterator["CompositionNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, kind: NodeKind) -> Optional["CompositionNode"]:
        for node in self.walk():
            if node.kind == kind:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "name": self.name}
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        data["layout"] = {
            "direction": self.layout.direction,
            "grow": self.layout.grow,
            "stretch": self.layout.stretch,
            "scroll": self.layout.scroll,
            "gap": self.layout.gap,
        }
        if self.props:
            data["props"] = {k: (v.value if isinstance(v, Enum) else v) for k, v in self.props.items()}
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data
