from decimal import Decimal

import pytest

from quote_builder.errors import (
    BadExtensionError,
    FileTooLargeError,
    TooManySheetsError,
    WorkbookImportError,
    WorkbookParseError,
    WorkbookValidationError,
)
from quote_builder.extract.excel_reader import (
    MAX_FILE_SIZE,
    import_project,
    read_project_from_excel,
    sanitize_number,
    sanitize_string,
)

from conftest import HEADER


def test_sanitize_string():
    assert sanitize_string(None) == ""
    assert sanitize_string("  chair  ") == "chair"
    assert sanitize_string(12345) == "12345"
    assert sanitize_string("x" * 80, 50) == "x" * 50


@pytest.mark.parametrize("value,expected", [
    ("abc", Decimal("1")),
    (None, Decimal("1")),
    ("", Decimal("1")),
    ("NaN", Decimal("1")),
    ("Infinity", Decimal("1")),
    (float("inf"), Decimal("1")),
    (99999999, Decimal("10000")),
    (-5, Decimal("1")),
    (" 12 ", Decimal("12")),
    (7.5, Decimal("7.5")),
    (True, Decimal("1")),
])
def test_sanitize_number_quantity_range(value, expected):
    assert sanitize_number(value, Decimal("1"), Decimal("10000"), Decimal("1")) == expected


def test_size_limit_checked_before_parsing():
    with pytest.raises(FileTooLargeError) as exc:
        import_project(b"\0" * (MAX_FILE_SIZE + 1), "big.xlsx")
    assert "10MB" in str(exc.value)
    assert isinstance(exc.value, WorkbookValidationError)


@pytest.mark.parametrize("name", ["quote.csv", "quote.xlsx.bak", "quote", "quote.xlsm", "quote.xlsx\n", "quote.xls\n"])
def test_bad_extension(xlsx, name):
    with pytest.raises(BadExtensionError):
        import_project(xlsx({"Office": [HEADER]}), name)


@pytest.mark.parametrize("name", ["quote.XLSX", "quote.Xls", "quote.xlsx"])
def test_extension_is_case_insensitive(xlsx, name):
    project = import_project(xlsx({"Office": [HEADER]}), name)
    assert project.rooms == ["Office"]


def test_corrupt_bytes_raise_parse_error():
    with pytest.raises(WorkbookParseError) as exc:
        import_project(b"definitely not a zip archive", "broken.xlsx")
    assert "corrupted" in str(exc.value)
    assert isinstance(exc.value, WorkbookImportError)


def test_too_many_sheets(xlsx):
    data = xlsx({f"Room {i}": [HEADER] for i in range(51)})
    with pytest.raises(TooManySheetsError):
        import_project(data, "many.xlsx")


def test_fifty_sheets_is_allowed(xlsx):
    data = xlsx({f"Room {i}": [HEADER] for i in range(50)})
    assert len(import_project(data, "many.xlsx").rooms) == 50


def test_rows_become_items(xlsx):
    data = xlsx({"Living Room": [
        HEADER,
        ["SOF-1", "Sofa", "VANGUARD", 2, 100, 327.6, "grey"],
        [12345, "Lamp", "Local", "3", "19.99", "59.97", None],
    ]})
    project = import_project(data, "Smith Job.xlsx")

    assert project.project_name == "Smith Job"
    assert project.rooms == ["Living Room"]
    sofa, lamp = project.items
    assert (sofa.sku, sofa.product_name, sofa.supplier) == ("SOF-1", "Sofa", "VANGUARD")
    assert sofa.quantity == 2
    assert sofa.base_cost == Decimal("100")
    assert sofa.final_price == Decimal("327.6")
    assert sofa.notes == "grey"
    assert sofa.room_name == "Living Room"
    assert lamp.sku == "12345"
    assert lamp.quantity == 3
    assert lamp.notes == ""
    assert sofa.id != lamp.id


def test_final_price_is_taken_verbatim(xlsx):
    data = xlsx({"Office": [HEADER, ["D-1", "Desk", "VANGUARD", 1, 100, 42, ""]]})
    assert import_project(data, "q.xlsx").items[0].final_price == Decimal("42")


def test_numeric_cells_are_clamped_and_defaulted(xlsx):
    data = xlsx({"Office": [
        HEADER,
        ["A", "Chair", "X", "abc", "n/a", -3, ""],
        ["B", "Table", "X", 99999999, 1e12, "oops", ""],
        ["C", "Shelf", "X", 2.6, "", None, ""],
    ]})
    a, b, c = import_project(data, "q.xlsx").items
    assert (a.quantity, a.base_cost, a.final_price) == (1, Decimal("0"), Decimal("0"))
    assert (b.quantity, b.base_cost, b.final_price) == (10000, Decimal("10000000"), Decimal("0"))
    assert c.quantity == 3


def test_strings_are_truncated(xlsx):
    data = xlsx({"Office": [HEADER, ["S" * 60, "P" * 600, "V" * 150, 1, 1, 1, "N" * 1200]]})
    it = import_project(data, "q.xlsx").items[0]
    assert len(it.sku) == 50
    assert len(it.product_name) == 500
    assert len(it.supplier) == 100
    assert len(it.notes) == 1000


def test_skip_rules(xlsx):
    data = xlsx({"Office": [
        ["KEEP-0", "header row is never data", "X", 1, 1, 1, ""],
        ["", "", "X", 1, 1, 1, "no sku, no product"],
        ["SubTotal-9", "Chair", "X", 1, 1, 1, ""],
        ["A-1", "Chair", "X", 1, "Grand TOTAL", 1, ""],
        ["", "Bench", "X", 1, 1, 1, ""],
        [],
        ["", "", "", "", "Room Total:", 123.4, ""],
    ]})
    project = import_project(data, "q.xlsx")
    assert [it.product_name for it in project.items] == ["Bench"]


def test_row_limit_per_sheet(xlsx):
    rows = [HEADER] + [[f"S{i}", "Chair", "X", 1, 1, 1, ""] for i in range(1005)]
    data = xlsx({"Office": rows, "Bedroom": [HEADER, ["B-1", "Bed", "X", 1, 1, 1, ""]]})
    project = import_project(data, "q.xlsx")
    office = [it for it in project.items if it.room_name == "Office"]
    assert len(office) == 1000
    assert office[-1].sku == "S999"
    assert [it.sku for it in project.items if it.room_name == "Bedroom"] == ["B-1"]


def test_summary_sheet_is_skipped_in_any_case(xlsx):
    data = xlsx({
        "SUMMARY": [HEADER, ["S-1", "Chair", "X", 1, 1, 1, ""]],
        "Empty Room": [HEADER],
        "Office": [HEADER, ["O-1", "Desk", "X", 1, 1, 1, ""]],
    })
    project = import_project(data, "q.xlsx")
    assert project.rooms == ["Empty Room", "Office"]
    assert [it.sku for it in project.items] == ["O-1"]


def test_project_name_is_sanitized(xlsx):
    name = "  " + "n" * 150 + ".xlsx"
    project = import_project(xlsx({"Office": [HEADER]}), name)
    assert project.project_name == "n" * 100


def test_read_project_from_disk(tmp_path, xlsx):
    path = tmp_path / "Kitchen Reno.xlsx"
    path.write_bytes(xlsx({"Kitchen": [HEADER, ["K-1", "Stool", "X", 4, 10, 40, ""]]}))
    project = read_project_from_excel(str(path))
    assert project.project_name == "Kitchen Reno"
    assert project.items[0].quantity == 4
