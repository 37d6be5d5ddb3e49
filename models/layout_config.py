from dataclasses import dataclass

ROW_LIMIT_OPTIONS = (5, 10, 25, 50, 100)
DEFAULT_ROW_LIMIT = 50


@dataclass(frozen=True)
class LayoutConfig:
    """Constantes de maquetación (pixeles). Se pasan explícitamente."""

    header_height: int = 56
    row_height: int = 40
    cell_padding: int = 10
    body_cell_vpadding: int = 10
    sort_reserve: int = 22
    sort_icon_size: int = 18
    header_content_gap: int = 4
    min_column_width: int = 8
    min_text_width: int = 4
    chip_padding: int = 16
    chip_gap: int = 4
    divider_thickness: int = 1
    checkbox_column_width: int = 48
    nav_rail_width: int = 72
    page_width: int = 1440
    page_height: int = 900
    page_padding: int = 24
    card_padding: int = 16
    card_radius: int = 12


@dataclass(frozen=True)
class DesignSystemKeys:
    """Identificadores estables que el host traduce a sus componentes."""

    chip: str = "chip"
    status: str = "status"
    boolean: str = "boolean"
    icon: str = "icon"
    checkbox: str = "checkbox"
    card_header: str = "card_header"
    nav: str = "nav"
    filter_bar: str = "filter_bar"


DEFAULT_LAYOUT = LayoutConfig()
DEFAULT_KEYS = DesignSystemKeys()
