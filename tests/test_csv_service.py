import pytest

from services.csv_service import CSVService, CSVServiceError


def test_parse_text_headers_and_rows_in_order() -> None:
    data = CSVService.parse_text("Name,Severity [status]\nAlice,critical\nBob,bad\n")

    assert data.columns == ["Name", "Severity [status]"]
    assert data.rows == [
        {"Name": "Alice", "Severity [status]": "critical"},
        {"Name": "Bob", "Severity [status]": "bad"},
    ]
    assert list(data.rows[0].keys()) == data.columns


def test_parse_text_quoted_fields_and_escaped_quotes() -> None:
    data = CSVService.parse_text('A,B\n"x, y","say ""hi"""\n1, "q,r"\n')

    assert data.rows[0] == {"A": "x, y", "B": 'say "hi"'}
    assert data.rows[1] == {"A": "1", "B": "q,r"}


def test_parse_text_trims_cells_and_ignores_carriage_returns() -> None:
    data = CSVService.parse_text('Region [c],Count\r\n"  EU  ", 3 \r\n')

    assert data.columns == ["Region [c]", "Count"]
    assert data.rows == [{"Region [c]": "EU", "Count": "3"}]


def test_parse_text_pads_short_rows_and_drops_extra_cells() -> None:
    data = CSVService.parse_text("A,B,C\n1\n\n1,2,3,4\n")

    assert data.rows == [
        {"A": "1", "B": "", "C": ""},
        {"A": "1", "B": "2", "C": "3"},
    ]


@pytest.mark.parametrize("text", ["", "   \n\n", "\r\n"])
def test_parse_text_empty_input_yields_empty_data(text) -> None:
    data = CSVService.parse_text(text)

    assert data.columns == []
    assert data.rows == []
    assert data.is_empty()


def test_parse_text_pipe_separated_keeps_pipes_inside_tag_groups() -> None:
    data = CSVService.parse_text("Name|Tags [chips|r]\nweb|a, b\n")

    assert data.columns == ["Name", "Tags [chips|r]"]
    assert data.rows == [{"Name": "web", "Tags [chips|r]": "a, b"}]


def test_detect_delimiter_ignores_pipes_in_brackets() -> None:
    assert CSVService.detect_delimiter("Name,Tags [chips|r]") == ","
    assert CSVService.detect_delimiter("Name|Tags|Owner") == "|"
    assert CSVService.detect_delimiter("Single") == ","


def test_read_csv_falls_back_to_latin1(tmp_path) -> None:
    path = tmp_path / "regiones_2024.csv"
    path.write_bytes("Ciudad,Región\nBogotá,Andina\n".encode("latin-1"))

    data = CSVService.read_csv(str(path))

    assert data.columns == ["Ciudad", "Región"]
    assert data.rows == [{"Ciudad": "Bogotá", "Región": "Andina"}]
    assert data.file_name == "regiones_2024.csv"


def test_read_csv_strips_utf8_bom(tmp_path) -> None:
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffName,Owner\nweb,ops\n".encode("utf-8"))

    data = CSVService.read_csv(str(path))

    assert data.columns == ["Name", "Owner"]


def test_read_csv_missing_file_raises_service_error(tmp_path) -> None:
    with pytest.raises(CSVServiceError):
        CSVService.read_csv(str(tmp_path / "missing.csv"))
