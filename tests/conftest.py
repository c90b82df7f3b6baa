import io

import pytest
from openpyxl import Workbook

HEADER = ["SKU", "Product Name", "Supplier", "Quantity", "Base Cost", "Final Price", "Notes"]


def build_xlsx(sheets):
    """sheets: {title: [row, ...]} -> xlsx bytes; rows are written as given."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def xlsx():
    return build_xlsx
