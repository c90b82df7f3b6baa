from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping

from quote_builder.models import LineItem, Project, Supplier
from quote_builder.suppliers import CURRENCY_CONVERSION, SUPPLIERS, get_supplier_by_name

CENT = Decimal("0.01")


def _to_decimal(v) -> Decimal:
    if isinstance(v, Decimal):
        return v
    return Decimal(str(v))


def compute_final_price(
    base_cost,
    supplier_name: str,
    quantity,
    suppliers: Mapping[str, Supplier] = SUPPLIERS,
    currency: Mapping[str, Decimal] = CURRENCY_CONVERSION,
) -> Decimal:
    """
    Landed price of a line: base cost * markup * currency factor * quantity,
    rounded half-up to the cent.

    An unknown supplier gets no markup and no rounding: base cost * quantity.
    """
    base = _to_decimal(base_cost)
    qty = _to_decimal(quantity)

    supplier = get_supplier_by_name(supplier_name, suppliers)
    if supplier is None:
        return base * qty

    conversion = currency[supplier.country]
    return (base * supplier.markup * conversion * qty).quantize(CENT, rounding=ROUND_HALF_UP)


def group_items_by_room(items: Iterable[LineItem]) -> Dict[str, List[LineItem]]:
    grouped: Dict[str, List[LineItem]] = {}
    for it in items:
        grouped.setdefault(it.room_name, []).append(it)
    return grouped


def room_total(items: Iterable[LineItem]) -> Decimal:
    return sum((it.final_price for it in items), Decimal("0.00"))


def project_total(project: Project) -> Decimal:
    return room_total(project.items)
