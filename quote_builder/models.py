from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass(frozen=True)
class Supplier:
    name: str
    country: str      # "CAN" | "USA"
    markup: Decimal


@dataclass
class LineItem:
    id: str
    room_name: str
    supplier: str
    sku: str
    quantity: int
    product_name: str
    base_cost: Decimal
    final_price: Decimal  # derived on add, verbatim on import
    notes: str = ""


@dataclass
class Project:
    project_name: str
    rooms: List[str] = field(default_factory=list)
    items: List[LineItem] = field(default_factory=list)
