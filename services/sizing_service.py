import logging
import math
from typing import Dict, List, Optional, Sequence

from models.layout_config import DEFAULT_LAYOUT, LayoutConfig
from models.table_model import Column, Row, SemanticKind, SizingResult, SortState
from services import value_normalizer as vn
from services.host_interfaces import (
    MeasurementOracle,
    TableResources,
    TextStyle,
    component_variant_axes,
    fetch_resource,
)

logger = logging.getLogger(__name__)

FIXED_SHAPE_KINDS = (SemanticKind.STATUS, SemanticKind.BOOLEAN, SemanticKind.ICON)


class ColumnSizingEngine:
    """
    Calcula el ancho de contenido de cada columna consultando el oráculo
    de medición del host. Las columnas de forma fija (status, boolean,
    icon) se miden una sola vez con una instancia representativa.
    """

    def __init__(self, oracle: MeasurementOracle, config: LayoutConfig = DEFAULT_LAYOUT):
        self.oracle = oracle
        self.config = config

    def compute(self, columns: Sequence[Column], rows: List[Row],
                sort_state: Optional[SortState] = None,
                resources: Optional[TableResources] = None) -> SizingResult:
        sort_state = sort_state or SortState.none()
        resources = resources or TableResources()
        representative: Dict[SemanticKind, Optional[int]] = {}

        result = SizingResult()
        for index, column in enumerate(columns):
            width = self.measure_text(column.display_label, TextStyle.HEADER)
            if sort_state.is_sorted_by(column.raw_header):
                width += self.config.sort_reserve

            kind = column.semantic_kind
            if kind == SemanticKind.CHIPS:
                content = self._chips_width(column, rows)
            elif kind in FIXED_SHAPE_KINDS:
                if kind not in representative:
                    representative[kind] = self._representative_width(kind, resources)
                content = representative[kind]
                if content is None:
                    content = self._fallback_width(column, rows)
            else:
                content = self._max_text_width(column, rows, lambda raw: raw)

            result.widths[index] = max(width, content, self.config.min_column_width)

        result.table_width = sum(w + self.config.cell_padding * 2 for w in result.widths.values())
        logger.debug("Anchos calculados: %s (total %d)", result.widths, result.table_width)
        return result

    def measure_text(self, value: str, style: TextStyle = TextStyle.BODY) -> int:
        w = math.ceil(self.oracle.measure_text(value, style))
        return max(self.config.min_text_width, w)

    def chip_group_width(self, raw: str) -> int:
        tokens = vn.split_tags(raw)
        if not tokens:
            return 0
        total = 0
        for i, token in enumerate(tokens):
            total += math.ceil(self.oracle.measure_text(token, TextStyle.CHIP)) + self.config.chip_padding
            if i > 0:
                total += self.config.chip_gap
        return max(self.config.min_text_width, total)

    def _chips_width(self, column: Column, rows: List[Row]) -> int:
        width = 0
        for row in rows:
            raw = (row.get(column.raw_header) or "").strip()
            if not raw:
                continue
            width = max(width, self.chip_group_width(raw))
        return width

    def _max_text_width(self, column: Column, rows: List[Row], to_text) -> int:
        width = 0
        for row in rows:
            width = max(width, self.measure_text(to_text(row.get(column.raw_header) or "")))
        return width

    def _fallback_width(self, column: Column, rows: List[Row]) -> int:
        if column.semantic_kind == SemanticKind.STATUS:
            return self._max_text_width(column, rows, vn.normalize_status)
        return self._max_text_width(column, rows, lambda raw: raw.strip())

    def _representative_width(self, kind: SemanticKind, resources: TableResources) -> Optional[int]:
        component = resources.component_for_kind(kind)
        if component is None:
            return None

        if kind == SemanticKind.STATUS:
            canonical = vn.UNSPECIFIED
        elif kind == SemanticKind.BOOLEAN:
            canonical = "true"
        else:
            axes = component_variant_axes(component)
            axis = vn.pick_variant_axis(list(axes))
            allowed = list(axes.get(axis) or []) if axis else []
            canonical = allowed[0] if allowed else None

        measured = fetch_resource(
            f"representative:{kind.value}",
            lambda: self.oracle.measure_representative(kind, canonical),
        )
        if not measured.ok or measured.value <= 0:
            logger.debug("Sin ancho representativo para %s, se mide fila por fila", kind.value)
            return None
        return math.ceil(measured.value)
