from __future__ import annotations

import json
import logging
import threading
from copy import deepcopy
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from quote_builder.config import DRAFT_SAVE_DELAY
from quote_builder.models import LineItem, Project

logger = logging.getLogger("quote_builder")

ITEM_KEYS = (
    "id",
    "roomName",
    "supplier",
    "sku",
    "quantity",
    "productName",
    "baseCost",
    "finalPrice",
    "notes",
)


def item_to_dict(it: LineItem) -> Dict[str, Any]:
    return {
        "id": it.id,
        "roomName": it.room_name,
        "supplier": it.supplier,
        "sku": it.sku,
        "quantity": it.quantity,
        "productName": it.product_name,
        "baseCost": str(it.base_cost),
        "finalPrice": str(it.final_price),
        "notes": it.notes,
    }


def item_from_dict(row: Dict[str, Any]) -> LineItem:
    missing = [key for key in ITEM_KEYS if key not in row]
    if missing:
        raise ValueError(f"Item {row.get('id', '?')} is missing keys: {missing}")

    return LineItem(
        id=str(row["id"]),
        room_name=str(row["roomName"]),
        supplier=str(row["supplier"]),
        sku=str(row["sku"]),
        quantity=int(row["quantity"]),
        product_name=str(row["productName"]),
        base_cost=Decimal(str(row["baseCost"])),
        final_price=Decimal(str(row["finalPrice"])),
        notes=str(row["notes"]),
    )


def project_to_snapshot(project: Project, saved_at: Optional[datetime] = None) -> Dict[str, Any]:
    saved_at = saved_at or datetime.now(timezone.utc)
    return {
        "projectName": project.project_name,
        "items": [item_to_dict(it) for it in project.items],
        "rooms": list(project.rooms),
        "lastSaved": saved_at.isoformat(),
    }


def project_from_snapshot(data: Dict[str, Any]) -> Tuple[Project, str]:
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object.")
    if (
        not isinstance(data.get("projectName"), str)
        or not isinstance(data.get("items"), list)
        or not isinstance(data.get("rooms"), list)
    ):
        raise ValueError("Invalid saved quote data structure")

    items = []
    for idx, row in enumerate(data["items"]):
        if not isinstance(row, dict):
            raise ValueError(f"items[{idx}] must be an object.")
        items.append(item_from_dict(row))

    project = Project(
        project_name=data["projectName"],
        rooms=[str(r) for r in data["rooms"]],
        items=items,
    )
    return project, str(data.get("lastSaved", ""))


class DraftStore:
    def __init__(self, json_path: Path):
        self.json_path = json_path

    def save(self, project: Project) -> Dict[str, Any]:
        snapshot = project_to_snapshot(project)
        self.json_path.parent.mkdir(parents=True, exist_ok=True)
        self.json_path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
        return snapshot

    def load(self) -> Optional[Tuple[Project, str]]:
        if not self.json_path.exists():
            return None

        try:
            data = json.loads(self.json_path.read_text(encoding="utf-8"), parse_float=Decimal)
            return project_from_snapshot(data)
        except (OSError, ValueError, TypeError, ArithmeticError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Failed to load saved quote %s: %s", self.json_path, e)
            return None

    def clear(self) -> None:
        try:
            self.json_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to clear saved quote %s: %s", self.json_path, e)


class DebouncedSaver:
    """Coalesces bursts of edits into one DraftStore.save after ``delay`` seconds of quiet."""

    def __init__(self, store: DraftStore, delay: float = DRAFT_SAVE_DELAY):
        self.store = store
        self.delay = delay
        self.last_saved: Optional[datetime] = None
        self._lock = threading.Lock()
        # held for the whole flush so saves land in the order they were taken
        self._save_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Project] = None

    def schedule(self, project: Project) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = deepcopy(project)
            self._timer = threading.Timer(self.delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        with self._save_lock:
            with self._lock:
                if self._timer is not None:
                    self._timer.cancel()
                    self._timer = None
                project, self._pending = self._pending, None

            if project is None:
                return
            try:
                self.store.save(project)
                self.last_saved = datetime.now()
            except OSError as e:
                logger.error("Failed to save quote: %s", e)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
