from __future__ import annotations

import io
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from quote_builder.config import WORKBOOK_CREATOR
from quote_builder.models import LineItem, Project
from quote_builder.pricing import group_items_by_room, room_total

logger = logging.getLogger("quote_builder")

SUMMARY_SHEET = "Summary"
TOTAL_LABEL = "Room Total:"

# (header, width)
COLUMNS = [
    ("SKU", 15),
    ("Product Name", 30),
    ("Supplier", 20),
    ("Quantity", 10),
    ("Base Cost", 12),
    ("Final Price", 12),
    ("Notes", 30),
]

HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFE0E0E0")
BOLD = Font(bold=True)

_SHEET_FORBIDDEN = re.compile(r"[\\/*?:\[\]]")
_FILE_FORBIDDEN = re.compile(r"[^a-zA-Z0-9\s-]")


def safe_sheet_name(room_name: str) -> str:
    """Excel sheet titles: max 31 chars, none of \\ / * ? : [ ]."""
    return _SHEET_FORBIDDEN.sub("_", room_name[:31])


def safe_file_name(project_name: str) -> str:
    return _FILE_FORBIDDEN.sub("", project_name).strip() or "Quote"


def _write_summary(ws: Worksheet, project: Project) -> None:
    ws.append(["Project Name", project.project_name])
    ws.append(["Total Items", "0"])
    ws.append(["Total Cost", "$0.00"])
    ws.append([])
    ws.append(["No items in this quote yet."])


def _write_room(ws: Worksheet, items: List[LineItem]) -> None:
    for i, (header, width) in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width

    ws.append([header for header, _ in COLUMNS])
    for cell in ws[1]:
        cell.font = BOLD
        cell.fill = HEADER_FILL

    for it in items:
        ws.append([
            it.sku,
            it.product_name,
            it.supplier,
            it.quantity,
            float(it.base_cost),
            float(it.final_price),
            it.notes,
        ])

    ws.append([])
    ws.append(["", "", "", "", TOTAL_LABEL, float(room_total(items)), ""])
    for cell in ws[ws.max_row]:
        cell.font = BOLD


def build_workbook(project: Project) -> Workbook:
    wb = Workbook()
    wb.properties.creator = WORKBOOK_CREATOR
    wb.properties.created = datetime.now()

    # every sheet is created by name; the default "Sheet" would clash with a room called "sheet"
    wb.remove(wb.active)

    by_room = group_items_by_room(project.items)
    if not by_room:
        _write_summary(wb.create_sheet(SUMMARY_SHEET), project)
        return wb

    # sheet titles are unique case-insensitively
    taken: Dict[str, str] = {}
    for room_name, items in by_room.items():
        title = safe_sheet_name(room_name)
        if not title:
            raise ValueError("Cannot export a room with an empty name.")
        other = taken.get(title.lower())
        if other is not None:
            raise ValueError(
                f"Rooms '{other}' and '{room_name}' both export as sheet '{title}'. Rename one of them."
            )
        taken[title.lower()] = room_name
        _write_room(wb.create_sheet(title), items)

    return wb


def export_project(project: Project) -> bytes:
    wb = build_workbook(project)
    buf = io.BytesIO()
    wb.save(buf)
    logger.info(
        "Exported '%s': %d items in %d sheet(s)",
        project.project_name, len(project.items), len(wb.sheetnames),
    )
    return buf.getvalue()


def save_project(project: Project, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{safe_file_name(project.project_name)}.xlsx"
    out_path.write_bytes(export_project(project))
    return out_path
