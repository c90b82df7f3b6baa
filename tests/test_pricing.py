from decimal import Decimal, ROUND_HALF_UP

import pytest

from quote_builder.models import LineItem, Project, Supplier
from quote_builder.pricing import compute_final_price, group_items_by_room, project_total, room_total
from quote_builder.suppliers import CURRENCY_CONVERSION, SUPPLIERS, get_supplier_by_name


def _item(room, price, sku="S"):
    return LineItem(
        id=sku, room_name=room, supplier="X", sku=sku, quantity=1,
        product_name="P", base_cost=Decimal(price), final_price=Decimal(price),
    )


def test_vanguard_scenario():
    assert compute_final_price(100, "VANGUARD", 2) == Decimal("327.60")


@pytest.mark.parametrize("name", list(SUPPLIERS))
def test_known_suppliers_use_markup_and_currency(name):
    s = SUPPLIERS[name]
    cost, qty = Decimal("123.45"), 3
    expected = (cost * s.markup * CURRENCY_CONVERSION[s.country] * qty).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    assert compute_final_price(cost, name, qty) == expected


def test_unknown_supplier_falls_back_to_cost_times_quantity():
    assert compute_final_price(Decimal("10.005"), "Some Local Shop", 3) == Decimal("30.015")
    assert compute_final_price(50, "vanguard", 2) == Decimal("100")  # lookup is case-sensitive


def test_rounds_half_up_at_the_cent():
    suppliers = {"HALF": Supplier("HALF", "CAN", Decimal("1"))}
    assert compute_final_price(Decimal("0.005"), "HALF", 1, suppliers=suppliers) == Decimal("0.01")
    assert compute_final_price(Decimal("0.125"), "HALF", 1, suppliers=suppliers) == Decimal("0.13")


def test_injected_tables():
    suppliers = {"ACME": Supplier("ACME", "USA", Decimal("2"))}
    currency = {"USA": Decimal("1.5"), "CAN": Decimal("1")}
    assert compute_final_price(10, "ACME", 1, suppliers=suppliers, currency=currency) == Decimal("30.00")
    assert compute_final_price(10, "VANGUARD", 1, suppliers=suppliers, currency=currency) == Decimal("10")


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        SUPPLIERS["NEW"] = Supplier("NEW", "CAN", Decimal("1"))
    with pytest.raises(TypeError):
        CURRENCY_CONVERSION["CAN"] = Decimal("2")
    assert get_supplier_by_name("BELLINI").markup == Decimal("2.35")
    assert get_supplier_by_name("Nobody") is None


def test_grouping_keeps_first_seen_room_order():
    items = [_item("Office", "1", "a"), _item("Bedroom", "2", "b"), _item("Office", "3", "c")]
    grouped = group_items_by_room(items)
    assert list(grouped) == ["Office", "Bedroom"]
    assert [it.sku for it in grouped["Office"]] == ["a", "c"]


def test_totals():
    items = [_item("Office", "10.10"), _item("Office", "0.20")]
    assert room_total(items) == Decimal("10.30")
    assert room_total([]) == Decimal("0")
    assert project_total(Project("p", items=items)) == Decimal("10.30")
