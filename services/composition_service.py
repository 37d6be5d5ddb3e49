"""
Construcción del árbol de composición de la tabla.

Orden fijo de etapas (de adentro hacia afuera):
  1. tabla base (encabezado, divisores, filas)
  2. columna fija de checkboxes   (include_checkboxes)
  3. tarjeta                      (place_within_card)
  4. página                       (place_within_page)

Cada etapa es una función CompositionNode -> CompositionNode y se aplican
con un reduce sobre las etapas habilitadas. Ninguna etapa interpreta datos.
"""
import logging
import os
import re
from functools import partial, reduce
from typing import Callable, List, Optional, Sequence

from models.composition_model import CompositionNode, LayoutHints, NodeKind
from models.layout_config import DEFAULT_LAYOUT, LayoutConfig
from models.table_model import (
    Column,
    GenerationOptions,
    Row,
    SemanticKind,
    SizingResult,
    SortDirection,
    SortState,
)
from services import value_normalizer as vn
from services.host_interfaces import (
    TableResources,
    TextStyle,
    TokenRole,
    component_properties,
    icon_variant_selection,
)

logger = logging.getLogger(__name__)

Stage = Callable[[CompositionNode], CompositionNode]

_NAME_SEPARATORS = re.compile(r"[_\-.\s]+")


def humanize_file_name(file_name: Optional[str]) -> str:
    base, _ = os.path.splitext(os.path.basename(file_name or ""))
    words = [w for w in _NAME_SEPARATORS.split(base) if w]
    if not words:
        return "Table"
    return " ".join(w[:1].upper() + w[1:] for w in words)


class TableCompositionBuilder:
    def __init__(self, config: LayoutConfig = DEFAULT_LAYOUT):
        self.config = config

    # ------------------------------------------------------------------
    #  PUNTO DE ENTRADA
    # ------------------------------------------------------------------
    def compose(self, columns: Sequence[Column], rows: List[Row], sizing: SizingResult,
                sort_state: SortState, options: GenerationOptions,
                resources: Optional[TableResources] = None) -> CompositionNode:
        resources = resources or TableResources()
        table = self.build_table(columns, rows, sizing, sort_state, resources)
        stages = self.stages(options, len(rows), resources)
        logger.debug("Etapas de composición: %d", len(stages))
        return reduce(lambda node, stage: stage(node), stages, table)

    def stages(self, options: GenerationOptions, row_count: int, resources: TableResources) -> List[Stage]:
        stages: List[Stage] = []
        if options.include_checkboxes:
            stages.append(partial(self.with_checkbox_column, row_count=row_count, resources=resources))
        if options.place_within_card:
            stages.append(partial(self.within_card, options=options, resources=resources))
        if options.place_within_page:
            stages.append(partial(self.within_page, options=options, resources=resources))
        return stages

    # ------------------------------------------------------------------
    #  TABLA BASE
    # ------------------------------------------------------------------
    def build_table(self, columns: Sequence[Column], rows: List[Row], sizing: SizingResult,
                    sort_state: SortState, resources: TableResources) -> CompositionNode:
        cfg = self.config
        table = CompositionNode(NodeKind.TABLE, "table", width=sizing.table_width,
                                layout=LayoutHints(direction="vertical"))

        table.append(self._header_row(columns, sizing, sort_state, resources))
        table.append(self.divider(sizing.table_width, resources))

        for i, row in enumerate(rows):
            table.append(self._data_row(columns, row, sizing, resources))
            if i < len(rows) - 1:
                table.append(self.divider(sizing.table_width, resources))

        body = len(rows) * cfg.row_height + max(0, len(rows) - 1) * cfg.divider_thickness
        table.height = cfg.header_height + cfg.divider_thickness + body
        return table

    def divider(self, width: int, resources: TableResources) -> CompositionNode:
        return CompositionNode(
            NodeKind.DIVIDER, "divider",
            width=max(1, round(width)), height=self.config.divider_thickness,
            props=self._token_props(TokenRole.DIVIDER, resources),
        )

    def _cell(self, name: str, width: int, height: int, column: Column) -> CompositionNode:
        return CompositionNode(
            NodeKind.CELL, name,
            width=width + self.config.cell_padding * 2, height=height,
            props={"alignment": column.alignment, "padding": self.config.cell_padding},
            layout=LayoutHints(direction="horizontal", gap=self.config.header_content_gap),
        )

    def _header_row(self, columns, sizing, sort_state, resources) -> CompositionNode:
        row = CompositionNode(NodeKind.ROW, "header", layout=LayoutHints(direction="horizontal"))
        for index, column in enumerate(columns):
            cell = self._cell("header cell", sizing.width_for(index), self.config.header_height, column)
            props = {"text": column.display_label, "style": TextStyle.HEADER}
            props.update(self._token_props(TokenRole.TEXT, resources))
            cell.append(CompositionNode(NodeKind.TEXT, "label", props=props))
            if sort_state.is_sorted_by(column.raw_header):
                cell.append(self.sort_indicator(sort_state.direction, resources))
            row.append(cell)
        return row

    def sort_indicator(self, direction: SortDirection, resources: TableResources) -> CompositionNode:
        name = "Sort / Desc" if direction == SortDirection.DESCENDING else "Sort / Asc"
        props = {"direction": direction}
        props.update(self._token_props(TokenRole.TEXT, resources))
        size = self.config.sort_icon_size
        return CompositionNode(NodeKind.SORT_INDICATOR, name, width=size, height=size, props=props)

    def _data_row(self, columns, row: Row, sizing, resources) -> CompositionNode:
        node = CompositionNode(NodeKind.ROW, "row", layout=LayoutHints(direction="horizontal"))
        for index, column in enumerate(columns):
            cell = self._cell("cell", sizing.width_for(index), self.config.row_height, column)
            cell.props["vertical_padding"] = self.config.body_cell_vpadding
            value = (row.get(column.raw_header) or "").strip()
            cell.append(self.cell_content(column, value, resources))
            node.append(cell)
        return node

    # ------------------------------------------------------------------
    #  CONTENIDO POR TIPO SEMÁNTICO
    # ------------------------------------------------------------------
    def cell_content(self, column: Column, value: str, resources: TableResources) -> CompositionNode:
        kind = column.semantic_kind
        if kind == SemanticKind.CHIPS:
            return self._tag_group(value, resources)
        if kind == SemanticKind.STATUS:
            return self._status(value, resources)
        if kind == SemanticKind.BOOLEAN:
            return self._boolean(value, resources)
        if kind == SemanticKind.ICON:
            return self._icon(value, resources)
        if kind == SemanticKind.LINK:
            return self._text(vn.link_text(value), resources, role=TokenRole.LINK)
        return self._text(value, resources)

    def _text(self, value: str, resources: TableResources, role: TokenRole = TokenRole.TEXT,
              emphasis: str = "regular") -> CompositionNode:
        props = {"text": value, "style": TextStyle.BODY, "emphasis": emphasis,
                 "link": role == TokenRole.LINK}
        props.update(self._token_props(role, resources))
        return CompositionNode(NodeKind.TEXT, "text", props=props)

    def _tag_group(self, value: str, resources: TableResources) -> CompositionNode:
        group = CompositionNode(NodeKind.TAG_GROUP, "tags",
                                layout=LayoutHints(direction="horizontal", gap=self.config.chip_gap))
        component = resources.component(resources.keys.chip)
        for token in vn.split_tags(value):
            props = {"label": token, "style": TextStyle.CHIP,
                     "component": resources.keys.chip if component else None}
            props.update(self._token_props(TokenRole.TEXT, resources))
            group.append(CompositionNode(NodeKind.TAG, f"Chip / {token}", props=props))
        return group

    def _status(self, value: str, resources: TableResources) -> CompositionNode:
        variant = vn.normalize_status(value)
        component = resources.component(resources.keys.status)
        if component is None:
            return self._text(variant, resources, emphasis="medium")
        properties = {"status": variant} if "status" in component_properties(component) else {}
        return CompositionNode(NodeKind.BADGE, f"Status / {variant}", props={
            "component": resources.keys.status, "value": variant, "properties": properties,
        })

    def _boolean(self, value: str, resources: TableResources) -> CompositionNode:
        component = resources.component(resources.keys.boolean)
        if component is None:
            return self._text(value, resources)
        flag = "true" if vn.boolean_display_value(value) else "false"
        properties = {"boolean": flag} if "boolean" in component_properties(component) else {}
        return CompositionNode(NodeKind.BADGE, "Boolean", props={
            "component": resources.keys.boolean, "value": flag, "properties": properties,
        })

    def _icon(self, value: str, resources: TableResources) -> CompositionNode:
        component = resources.component(resources.keys.icon)
        if component is None:
            return self._text(value, resources)
        selection = icon_variant_selection(component, value)
        return CompositionNode(NodeKind.ICON, "Icon", props={
            "component": resources.keys.icon, "properties": selection or {},
        })

    # ------------------------------------------------------------------
    #  ETAPAS OPCIONALES
    # ------------------------------------------------------------------
    def with_checkbox_column(self, table: CompositionNode, row_count: int,
                             resources: TableResources) -> CompositionNode:
        cfg = self.config
        width = cfg.checkbox_column_width
        column = CompositionNode(NodeKind.FIXED_COLUMN, "checkbox column", width=width,
                                 height=table.height, layout=LayoutHints(direction="vertical"))
        column.append(self._checkbox_cell("header checkbox", cfg.header_height, resources))
        column.append(self.divider(width, resources))
        for i in range(row_count):
            column.append(self._checkbox_cell("row checkbox", cfg.row_height, resources))
            if i < row_count - 1:
                column.append(self.divider(width, resources))

        table.layout.scroll = True
        table.layout.grow = True
        wrapper = CompositionNode(NodeKind.SELECTABLE_TABLE, "table with selection",
                                  layout=LayoutHints(direction="horizontal"))
        wrapper.append(column)
        wrapper.append(table)
        return wrapper

    def _checkbox_cell(self, name: str, height: int, resources: TableResources) -> CompositionNode:
        key = resources.keys.checkbox
        has_component = resources.component(key) is not None
        cell = CompositionNode(NodeKind.CELL, name, width=self.config.checkbox_column_width, height=height,
                               props={"alignment": "center"})
        cell.append(CompositionNode(NodeKind.CHECKBOX, "checkbox", props={
            "component": key if has_component else None, "checked": False,
        }))
        return cell

    def within_card(self, inner: CompositionNode, options: GenerationOptions,
                    resources: TableResources) -> CompositionNode:
        cfg = self.config
        props = {"radius": cfg.card_radius, "padding": cfg.card_padding,
                 "effect": "drop-shadow" if options.card_shadow else None}
        props.update(self._token_props(TokenRole.CARD_BACKGROUND, resources, prefix="background_"))
        props.update(self._token_props(TokenRole.CARD_BORDER, resources, prefix="border_"))
        card = CompositionNode(NodeKind.CARD, "card", props=props, layout=LayoutHints(direction="vertical"))

        if options.include_card_header:
            key = resources.keys.card_header
            header = CompositionNode(NodeKind.CARD_HEADER, "card header", layout=LayoutHints(stretch=True))
            if resources.component(key) is not None:
                header.props["component"] = key
            else:
                header.append(CompositionNode(NodeKind.TEXT, "card title", props={
                    "text": humanize_file_name(options.file_name), "style": TextStyle.HEADER}))
            card.append(header)

        inner.layout.grow = True
        inner.layout.stretch = True
        card.append(inner)
        return card

    def within_page(self, inner: CompositionNode, options: GenerationOptions,
                    resources: TableResources) -> CompositionNode:
        cfg = self.config
        page = CompositionNode(NodeKind.PAGE, "page", width=cfg.page_width, height=cfg.page_height,
                               layout=LayoutHints(direction="horizontal"))

        nav_key = resources.keys.nav
        nav = CompositionNode(NodeKind.NAV_RAIL, "navigation", layout=LayoutHints(stretch=True))
        if resources.component(nav_key) is not None:
            nav.props["component"] = nav_key
        else:
            nav.width = cfg.nav_rail_width
        page.append(nav)

        content = CompositionNode(NodeKind.CONTENT, "content", props={"padding": cfg.page_padding},
                                  layout=LayoutHints(direction="vertical", grow=True, stretch=True,
                                                     gap=cfg.page_padding))
        content.append(CompositionNode(NodeKind.TITLE, "title", props={
            "text": humanize_file_name(options.file_name), "style": TextStyle.HEADER}))

        if options.include_filter_bar:
            filter_key = resources.keys.filter_bar
            bar = CompositionNode(NodeKind.FILTER_BAR, "filters", layout=LayoutHints(stretch=True))
            if resources.component(filter_key) is not None:
                bar.props["component"] = filter_key
            content.append(bar)

        inner.layout.grow = True
        inner.layout.stretch = True
        content.append(inner)
        page.append(content)
        return page

    @staticmethod
    def _token_props(role: TokenRole, resources: TableResources, prefix: str = "") -> dict:
        return {f"{prefix}token_role": role, f"{prefix}token": resources.token(role)}


def compose(columns: Sequence[Column], rows: List[Row], sizing: SizingResult, sort_state: SortState,
            options: GenerationOptions, resources: Optional[TableResources] = None,
            config: LayoutConfig = DEFAULT_LAYOUT) -> CompositionNode:
    return TableCompositionBuilder(config).compose(columns, rows, sizing, sort_state, options, resources)
