from __future__ import annotations

import io
import logging
import re
import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pathlib import Path
from typing import List

from openpyxl import load_workbook

from quote_builder.errors import (
    BadExtensionError,
    FileTooLargeError,
    TooManySheetsError,
    WorkbookParseError,
)
from quote_builder.models import LineItem, Project

logger = logging.getLogger("quote_builder")

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
MAX_SHEETS = 50
MAX_ROWS_PER_SHEET = 1000

MAX_STRING_LENGTH = 500
MAX_NOTES_LENGTH = 1000
MAX_SKU_LENGTH = 50
MAX_SUPPLIER_LENGTH = 100
MAX_SHEET_NAME_LENGTH = 50
MAX_PROJECT_NAME_LENGTH = 100

MAX_QUANTITY = Decimal("10000")
MAX_COST = Decimal("10000000")

SUMMARY_SHEET = "summary"

_EXTENSION_RE = re.compile(r"\.xlsx?\Z", re.IGNORECASE)


def sanitize_string(value, max_length: int = MAX_STRING_LENGTH) -> str:
    if value is None:
        return ""
    return str(value).strip()[:max_length]


def sanitize_number(value, min_value: Decimal, max_value: Decimal, default: Decimal) -> Decimal:
    """
    Any cell value -> Decimal in [min_value, max_value].
    Blank, non-numeric or non-finite values become ``default``.
    """
    if value is None or isinstance(value, (bytes, bytearray)):
        return default
    if isinstance(value, bool):
        value = int(value)
    try:
        if isinstance(value, (int, float, Decimal)):
            num = Decimal(str(value))
        else:
            s = str(value).strip()
            if s == "":
                return default
            num = Decimal(s)
    except (InvalidOperation, ValueError):
        return default
    if not num.is_finite():
        return default
    return max(min_value, min(max_value, num))


def _sanitize_quantity(value) -> int:
    qty = sanitize_number(value, Decimal("1"), MAX_QUANTITY, Decimal("1"))
    return int(qty.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _cell(values: tuple, idx: int):
    return values[idx] if idx < len(values) else None


def _rows_to_items(rows, room_name: str) -> List[LineItem]:
    items: List[LineItem] = []

    for values in rows:
        if len(items) >= MAX_ROWS_PER_SHEET:
            break

        sku = sanitize_string(_cell(values, 0), MAX_SKU_LENGTH)
        product_name = sanitize_string(_cell(values, 1), MAX_STRING_LENGTH)
        supplier = sanitize_string(_cell(values, 2), MAX_SUPPLIER_LENGTH)
        quantity = _sanitize_quantity(_cell(values, 3))
        base_cost = sanitize_number(_cell(values, 4), Decimal("0"), MAX_COST, Decimal("0"))
        final_price = sanitize_number(_cell(values, 5), Decimal("0"), MAX_COST, Decimal("0"))
        notes = sanitize_string(_cell(values, 6), MAX_NOTES_LENGTH)

        # empty rows and the exporter's own total rows
        if not sku and not product_name:
            continue
        if "total" in sku.lower():
            continue
        if "total" in sanitize_string(_cell(values, 4)).lower():
            continue

        items.append(LineItem(
            id=str(uuid.uuid4()),
            room_name=room_name,
            supplier=supplier,
            sku=sku,
            quantity=quantity,
            product_name=product_name,
            base_cost=base_cost,
            final_price=final_price,
            notes=notes,
        ))

    return items


def import_project(file_bytes: bytes, file_name: str) -> Project:
    if len(file_bytes) > MAX_FILE_SIZE:
        raise FileTooLargeError(MAX_FILE_SIZE)

    if not _EXTENSION_RE.search(file_name):
        raise BadExtensionError(file_name)

    try:
        wb = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except Exception as e:
        logger.warning("Workbook '%s' could not be parsed: %s", file_name, e)
        raise WorkbookParseError() from e

    try:
        if len(wb.sheetnames) > MAX_SHEETS:
            raise TooManySheetsError(MAX_SHEETS)

        project = Project(
            project_name=sanitize_string(_EXTENSION_RE.sub("", file_name), MAX_PROJECT_NAME_LENGTH),
        )

        for ws in wb.worksheets:
            sheet_name = sanitize_string(ws.title, MAX_SHEET_NAME_LENGTH)
            if sheet_name.lower() == SUMMARY_SHEET:
                continue

            project.rooms.append(sheet_name)
            # read-only sheets are parsed lazily, broken sheet XML surfaces here
            try:
                items = _rows_to_items(ws.iter_rows(min_row=2, values_only=True), sheet_name)
            except Exception as e:
                logger.warning("Sheet '%s' in '%s' could not be parsed: %s", sheet_name, file_name, e)
                raise WorkbookParseError() from e
            project.items.extend(items)
    finally:
        wb.close()

    logger.info(
        "Imported '%s': %d items in %d room(s)",
        file_name, len(project.items), len(project.rooms),
    )
    return project


def read_project_from_excel(path: str) -> Project:
    p = Path(path)
    return import_project(p.read_bytes(), p.name)
