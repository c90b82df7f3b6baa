from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

from quote_builder.config import DEFAULT_PROJECT_NAME, DEFAULT_ROOMS
from quote_builder.extract.excel_reader import import_project
from quote_builder.models import LineItem, Project
from quote_builder.pricing import compute_final_price, group_items_by_room, project_total
from quote_builder.render.excel_template import export_project, save_project

logger = logging.getLogger("quote_builder")


def merge_rooms(*room_lists: List[str]) -> List[str]:
    """Ordered union, first occurrence wins."""
    out: List[str] = []
    for rooms in room_lists:
        for r in rooms:
            if r not in out:
                out.append(r)
    return out


class QuoteSession:
    """
    Working state of one quote: the project being edited plus the operations
    the UI dispatches against it.

    Import and restore never mutate the current project in place; they build a
    new Project and swap it in once parsing succeeded.
    """

    def __init__(self, project: Optional[Project] = None):
        self.project = project or Project(
            project_name=DEFAULT_PROJECT_NAME,
            rooms=list(DEFAULT_ROOMS),
        )

    # ---------------------------
    # editing
    # ---------------------------

    def set_project_name(self, name: str) -> None:
        self.project.project_name = name

    def add_room(self, name: str) -> Optional[str]:
        name = (name or "").strip()
        if not name:
            return None
        if name not in self.project.rooms:
            self.project.rooms.append(name)
        return name

    def add_item(
        self,
        room_name: str,
        supplier: str,
        product_name: str,
        base_cost,
        quantity=1,
        sku: str = "",
        notes: str = "",
    ) -> LineItem:
        if not room_name:
            raise ValueError("Select a room.")
        if not supplier:
            raise ValueError("Select a supplier.")
        if not product_name or not product_name.strip():
            raise ValueError("Product name is required.")

        try:
            cost = Decimal(str(base_cost).replace(",", ".").strip())
            qty = int(str(quantity).strip())
        except (InvalidOperation, ValueError) as e:
            raise ValueError("Base cost and quantity must be numbers.") from e

        if not cost.is_finite() or cost <= 0:
            raise ValueError("Base cost must be greater than zero.")
        if qty < 1:
            raise ValueError("Quantity must be at least 1.")

        item = LineItem(
            id=str(uuid.uuid4()),
            room_name=room_name,
            supplier=supplier,
            sku=sku.strip(),
            quantity=qty,
            product_name=product_name.strip(),
            base_cost=cost,
            final_price=compute_final_price(cost, supplier, qty),
            notes=notes.strip(),
        )
        self.project.items.append(item)
        return item

    def remove_item(self, item_id: str) -> bool:
        before = len(self.project.items)
        self.project.items = [it for it in self.project.items if it.id != item_id]
        return len(self.project.items) != before

    # ---------------------------
    # views
    # ---------------------------

    def items_by_room(self) -> Dict[str, List[LineItem]]:
        return group_items_by_room(self.project.items)

    def total_cost(self) -> Decimal:
        return project_total(self.project)

    # ---------------------------
    # workbook / draft
    # ---------------------------

    def export_bytes(self) -> bytes:
        return export_project(self.project)

    def export_to(self, out_dir: Path) -> Path:
        return save_project(self.project, out_dir)

    def import_file(self, file_bytes: bytes, file_name: str) -> Project:
        imported = import_project(file_bytes, file_name)
        self.apply_import(imported)
        return imported

    def apply_import(self, imported: Project) -> None:
        self.project = Project(
            project_name=imported.project_name,
            rooms=merge_rooms(DEFAULT_ROOMS, imported.rooms),
            items=list(imported.items),
        )

    def restore_draft(self, saved: Project) -> None:
        self.apply_import(saved)

    def quote_summary(
        self,
        client_name: str,
        client_email: str,
        client_phone: str = "",
        message: str = "",
    ) -> dict:
        summary = {
            "projectName": self.project.project_name,
            "client": {
                "clientName": client_name,
                "clientEmail": client_email,
                "clientPhone": client_phone,
                "message": message,
            },
            "items": [
                {
                    "room": it.room_name,
                    "product": it.product_name,
                    "supplier": it.supplier,
                    "sku": it.sku,
                    "quantity": it.quantity,
                    "baseCost": float(it.base_cost),
                    "finalPrice": float(it.final_price),
                    "notes": it.notes,
                }
                for it in self.project.items
            ],
            "totalCost": float(self.total_cost()),
            "submittedAt": datetime.now(timezone.utc).isoformat(),
        }
        logger.info("Quote submitted: %s (%d items)", self.project.project_name, len(self.project.items))
        return summary
