import pytest

from models.layout_config import DEFAULT_LAYOUT
from models.table_model import SemanticKind, SortDirection, SortState
from services.header_service import parse_headers
from services.host_interfaces import ResourceCatalog, TextStyle
from services.sizing_service import ColumnSizingEngine


def _compute(oracle, headers, rows, sort_state=None, resources=None):
    return ColumnSizingEngine(oracle).compute(parse_headers(headers), rows, sort_state, resources)


def test_plain_column_uses_widest_cell(oracle) -> None:
    rows = [{"Name": "Bartholomew"}, {"Name": "Al"}]

    result = _compute(oracle, ["Name"], rows)

    assert result.widths == {0: 77}
    assert result.table_width == 77 + 2 * DEFAULT_LAYOUT.cell_padding


def test_header_wins_when_cells_are_narrow(oracle) -> None:
    result = _compute(oracle, ["Name"], [{"Name": "Al"}])

    assert result.width_for(0) == 32


def test_sorted_column_reserves_room_for_indicator(oracle) -> None:
    rows = [{"Name": "Al"}]
    sort_state = SortState("Name", SortDirection.ASCENDING)

    result = _compute(oracle, ["Name"], rows, sort_state)

    assert result.width_for(0) == 32 + DEFAULT_LAYOUT.sort_reserve


def test_chips_width_adds_padding_and_gaps(oracle) -> None:
    rows = [{"Tags [chips]": "ab, cde"}, {"Tags [chips]": "x"}, {"Tags [chips]": ""}]

    result = _compute(oracle, ["Tags [chips]"], rows)

    assert result.width_for(0) == (12 + 16) + (18 + 16 + 4)
    assert ("ab", TextStyle.CHIP) in oracle.text_calls


def test_representative_width_is_measured_once_per_kind(make_oracle, design_system, variables) -> None:
    oracle = make_oracle(representative={SemanticKind.STATUS: 73.2})
    resources = ResourceCatalog.load(design_system, variables)
    headers = ["Health [status]", "Severity [status]"]
    rows = [{"Health [status]": "critical", "Severity [status]": "low"}]

    result = _compute(oracle, headers, rows, resources=resources)

    assert result.widths == {0: 74, 1: 74}
    assert oracle.representative_calls == [(SemanticKind.STATUS, "Unspecified")]


def test_icon_representative_uses_first_allowed_variant(make_oracle, design_system, variables) -> None:
    oracle = make_oracle(representative={SemanticKind.ICON: 20})
    resources = ResourceCatalog.load(design_system, variables)

    result = _compute(oracle, ["Hosting [icon]"], [{"Hosting [icon]": "cloud"}], resources=resources)

    assert oracle.representative_calls == [(SemanticKind.ICON, "On Prem")]
    assert result.width_for(0) == 56


def test_boolean_representative_uses_true(make_oracle, design_system, variables) -> None:
    oracle = make_oracle(representative={SemanticKind.BOOLEAN: 100})
    resources = ResourceCatalog.load(design_system, variables)

    result = _compute(oracle, ["Ok [bool]"], [{"Ok [bool]": "no"}], resources=resources)

    assert oracle.representative_calls == [(SemanticKind.BOOLEAN, "true")]
    assert result.width_for(0) == 100


def test_status_without_component_measures_normalized_text(oracle) -> None:
    rows = [{"Health [status]": "bogus"}, {"Health [status]": "low"}]

    result = _compute(oracle, ["Health [status]"], rows)

    assert result.width_for(0) == len("Unspecified") * 7
    assert oracle.representative_calls == []


@pytest.mark.parametrize("representative", [None, 0, -5, RuntimeError("host failure")])
def test_unusable_representative_falls_back_to_rows(make_oracle, design_system, variables, representative) -> None:
    oracle = make_oracle(representative={SemanticKind.BOOLEAN: representative})
    resources = ResourceCatalog.load(design_system, variables)
    rows = [{"Monitored [bool]": "  Maybe  "}]

    result = _compute(oracle, ["Monitored [bool]"], rows, resources=resources)

    assert result.width_for(0) == len("Monitored") * 8
    assert ("Maybe", TextStyle.BODY) in oracle.text_calls


def test_every_width_respects_column_floor(oracle) -> None:
    headers = ["", "[chips]", "[status]"]
    rows = [{"": "", "[chips]": "", "[status]": ""}]

    result = _compute(oracle, headers, rows)

    assert all(w >= DEFAULT_LAYOUT.min_column_width for w in result.widths.values())
    assert result.width_for(1) == DEFAULT_LAYOUT.min_column_width


def test_empty_rows_still_size_headers(oracle) -> None:
    result = _compute(oracle, ["Owner", "Count [r]"], [])

    assert result.widths == {0: 40, 1: 40}
    assert result.table_width == 80 + 4 * DEFAULT_LAYOUT.cell_padding


def test_measure_text_rounds_up_and_applies_text_floor(oracle) -> None:
    engine = ColumnSizingEngine(oracle)

    assert engine.measure_text("a", TextStyle.BODY) == 7
    assert engine.measure_text("", TextStyle.BODY) == DEFAULT_LAYOUT.min_text_width
