from functools import cmp_to_key

import pytest

from models.table_model import SortDirection, SortState
from services.header_service import parse_header
from services.sort_service import (
    SortServiceError,
    build_comparator,
    compare_cells,
    parse_date_millis,
    parse_duration_seconds,
    parse_numeric,
    sort_rows,
)


def _values(rows, header):
    return [row[header] for row in rows]


def _sorted(header, values, direction=SortDirection.ASCENDING):
    column = parse_header(header)
    rows = [{header: v} for v in values]
    return _values(sort_rows([column], rows, SortState(header, direction)), header)


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("2 hours", 7200),
        ("1 day", 86400),
        ("3d", 3 * 86400),
        ("1.5 h", 5400),
        ("10 mins", 600),
        ("2 weeks", 14 * 86400),
        ("1 month", 30 * 86400),
        ("1 yr", 365 * 86400),
        ("45 s", 45),
    ],
)
def test_parse_duration_seconds(text, seconds) -> None:
    assert parse_duration_seconds(text) == pytest.approx(seconds)


def test_parse_duration_rejects_plain_text() -> None:
    assert parse_duration_seconds("Alice") is None
    assert parse_duration_seconds("") is None


def test_parse_date_millis_local_format_with_meridiem() -> None:
    midnight = parse_date_millis("12/1/2023")

    assert parse_date_millis("12/1/2023 12:00 AM") == midnight
    assert parse_date_millis("12/1/2023 12:00 PM") == midnight + 12 * 3600 * 1000
    assert parse_date_millis("12/1/2023 1:30 PM") == midnight + 13.5 * 3600 * 1000


def test_parse_date_millis_generic_formats() -> None:
    assert parse_date_millis("2024-03-01") > parse_date_millis("2023-12-25")


@pytest.mark.parametrize(
    "text",
    ["", "13/45/2024", "2024", "1,200", "Alice", "now", "today", "Tomorrow", " yesterday "],
)
def test_parse_date_millis_rejects_non_dates(text) -> None:
    assert parse_date_millis(text) is None


@pytest.mark.parametrize("text", ["May", "Jan", "June", "Monday", "3000-01-01", "1/1/9999"])
def test_parse_date_millis_never_raises_on_partial_dates(text) -> None:
    result = parse_date_millis(text)

    assert result is None or isinstance(result, float)


def test_plain_column_with_month_names_sorts() -> None:
    result = _sorted("Name", ["May", "April", "June", "Bob"])

    assert sorted(result) == ["April", "Bob", "June", "May"]
    assert result[:2] == ["April", "Bob"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [("1,200", 1200.0), (" 3.5 ", 3.5), ("-2", -2.0), ("", None), ("abc", None), ("inf", None), ("nan", None)],
)
def test_parse_numeric(text, expected) -> None:
    assert parse_numeric(text) == expected


def test_plain_text_sorts_lexically() -> None:
    assert _sorted("Name", ["Bob", "Alice"]) == ["Alice", "Bob"]
    assert _sorted("Name", ["bob", "Alice", "alice"]) == ["Alice", "alice", "bob"]


def test_status_sorts_by_severity_rank() -> None:
    assert _sorted("Health [status]", ["healthy", "bogus", "critical", "low"]) == [
        "critical", "low", "healthy", "bogus",
    ]


def test_boolean_sorts_true_first_ascending() -> None:
    assert _sorted("Flag [bool]", ["no", "yes", "no", "true"]) == ["yes", "true", "no", "no"]
    assert _sorted("Flag [bool]", ["yes", "no"], SortDirection.DESCENDING) == ["no", "yes"]


def test_boolean_unknown_values_fall_through_to_lexical() -> None:
    assert _sorted("Flag [bool]", ["Maybe", "yes"]) == ["Maybe", "yes"]


def test_durations_compare_by_length() -> None:
    assert _sorted("Uptime [r]", ["1 day", "2 hours", "3 weeks"]) == ["2 hours", "1 day", "3 weeks"]


def test_dates_compare_chronologically() -> None:
    assert _sorted("Seen", ["3/1/2024", "12/25/2023"]) == ["12/25/2023", "3/1/2024"]


def test_numbers_compare_numerically() -> None:
    assert _sorted("Count", ["1,200", "300", "25"]) == ["25", "300", "1,200"]


def test_chips_compare_by_first_token() -> None:
    assert _sorted("Tags [chips]", ["prod, a", "dev, z", "Edge"]) == ["dev, z", "Edge", "prod, a"]


def test_descending_reverses_ascending_for_distinct_values() -> None:
    values = ["Carol", "alice", "Bob", "dave"]

    ascending = _sorted("Name", values)
    descending = _sorted("Name", values, SortDirection.DESCENDING)

    assert descending == list(reversed(ascending))


def test_equal_cells_keep_input_order() -> None:
    header = "Health [status]"
    rows = [{header: "bad", "id": "1"}, {header: "critical", "id": "2"}, {header: "bad", "id": "3"}]

    result = sort_rows([parse_header(header)], rows, SortState(header, SortDirection.ASCENDING))

    assert [r["id"] for r in result] == ["2", "1", "3"]


@pytest.mark.parametrize(
    "header",
    ["Name", "Health [status]", "Flag [bool]", "Tags [chips]", "Uptime [r]"],
)
def test_comparator_is_antisymmetric(header) -> None:
    column = parse_header(header)
    samples = ["", "yes", "no", "critical", "bad", "2 hours", "1 day", "12/1/2023", "300", "a, b", "Zed",
               "now", "today", "May", "June"]

    for a in samples:
        for b in samples:
            assert compare_cells(column, a, b) == -compare_cells(column, b, a)


def test_comparator_trims_cells() -> None:
    compare = build_comparator(parse_header("Name"), SortDirection.ASCENDING)

    assert compare({"Name": "  Alice "}, {"Name": "Alice"}) == 0
    assert compare({"Name": None}, {"Name": "x"}) < 0


def test_comparator_usable_as_sort_key() -> None:
    column = parse_header("Count")
    compare = build_comparator(column, SortDirection.DESCENDING)

    rows = sorted([{"Count": "1"}, {"Count": "10"}, {"Count": "2"}], key=cmp_to_key(compare))

    assert _values(rows, "Count") == ["10", "2", "1"]


def test_build_comparator_rejects_none_direction() -> None:
    with pytest.raises(SortServiceError):
        build_comparator(parse_header("Name"), SortDirection.NONE)


def test_sort_rows_without_active_sort_returns_copy() -> None:
    rows = [{"Name": "b"}, {"Name": "a"}]

    result = sort_rows([parse_header("Name")], rows, SortState.none())

    assert result == rows
    assert result is not rows


def test_sort_rows_ignores_unselected_column() -> None:
    rows = [{"Name": "b"}, {"Name": "a"}]

    result = sort_rows([parse_header("Name")], rows, SortState("Other", SortDirection.ASCENDING))

    assert result == rows
