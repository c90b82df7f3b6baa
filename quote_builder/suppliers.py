from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional

from quote_builder.models import Supplier

_RAW_SUPPLIERS = [
    ("BELLINI", "CAN", "2.35"),
    ("CANADEL", "CAN", "2.65"),
    ("CELADON ART", "CAN", "2.48"),
    ("CHARLOTTE FABRICS", "CAN", "2.33"),
    ("CUDDLE DOWN", "CAN", "2.33"),
    ("JF FABRICS", "CAN", "2.44"),
    ("KRAVET", "CAN", "2.38"),
    ("LH HOME", "CAN", "2.44"),
    ("MERCANA", "CAN", "2.5"),
    ("METRO WALL", "CAN", "2.48"),
    ("MOBITAL", "CAN", "2.41"),
    ("MOE'S HOME", "CAN", "2.6"),
    ("PHILLIP JEFFRIES", "CAN", "2.27"),
    ("RATANA", "CAN", "2.08"),
    ("RENWIL", "CAN", "2.48"),
    ("ROMANO", "CAN", "2.5"),
    ("SEALY/S&F", "CAN", "2.38"),
    ("STYLE IN FORM", "CAN", "2.34"),
    ("STYLUS", "CAN", "2.44"),
    ("SUNPAN", "CAN", "2.5"),
    ("SURYA", "CAN", "2.28"),
    ("UNIVERSAL", "CAN", "2.44"),
    ("VAN GOGH", "CAN", "2.34"),
    ("WEST BROS", "CAN", "2.46"),
    ("AMERICAN LEATHER", "USA", "1.29"),
    ("AMITY HOME", "USA", "4.2"),
    ("ANNIE SELKE", "USA", "3.8"),
    ("ARMEN LIVING", "USA", "3.65"),
    ("ARTERIORS", "USA", "4.2"),
    ("BASSETT", "USA", "3.99"),
    ("BERNHARDT", "USA", "1.4"),
    ("CURREY AND CO.", "USA", "3.8"),
    ("DOVETAIL", "USA", "3.64"),
    ("EICHHOLTZ", "USA", "3.24"),
    ("ESSENTIALS FOR LIVING", "USA", "3.65"),
    ("ETHNICRAFT", "USA", "3.5"),
    ("FOUR HANDS", "USA", "3.95"),
    ("FURNITURE CLASSICS", "USA", "3.8"),
    ("GLOBAL VIEWS", "USA", "3.49"),
    ("JAIPUR LIVING", "USA", "3.89"),
    ("LEFTBANK ART", "USA", "3.8"),
    ("LEXINGTON", "USA", "3.65"),
    ("LOLOI RUGS", "USA", "3.92"),
    ("LUONTO", "USA", "4"),
    ("PHILLIPS", "USA", "4.58"),
    ("PALECEK", "USA", "1.87"),
    ("ROWE FURNITURE", "USA", "3.1"),
    ("SUMMER CLASSICS", "USA", "3.8"),
    ("UTTERMOST", "USA", "3.95"),
    ("VANGUARD", "USA", "1.17"),
]

# name -> Supplier, insertion order kept for the form's dropdown
SUPPLIERS: Mapping[str, Supplier] = MappingProxyType({
    name: Supplier(name=name, country=country, markup=Decimal(markup))
    for name, country, markup in _RAW_SUPPLIERS
})

CURRENCY_CONVERSION: Mapping[str, Decimal] = MappingProxyType({
    "CAN": Decimal("1"),
    "USA": Decimal("1.4"),
})


def get_supplier_by_name(name: str, suppliers: Mapping[str, Supplier] = SUPPLIERS) -> Optional[Supplier]:
    return suppliers.get(name)
