from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import BatteryItem


@dataclass
class FilterState:
    search: str = ""
    type_filter: Optional[str] = None
    low_stock_only: bool = False


def matches(item: BatteryItem, search: str = "", type_filter: Optional[str] = None,
            low_stock_only: bool = False) -> bool:
    term = search.lower()
    if term and term not in item.brand.lower() and term not in item.model.lower():
        return False
    if type_filter is not None and item.type != type_filter:
        return False
    if low_stock_only and not item.is_low_stock:
        return False
    return True


def apply_filters(items: Iterable[BatteryItem], search: str = "", type_filter: Optional[str] = None,
                  low_stock_only: bool = False) -> List[BatteryItem]:
    """Return the matching items, low-stock first and then by brand.

    Pure: the input is left untouched and a new list is returned.
    """
    out = [i for i in items if matches(i, search, type_filter, low_stock_only)]
    # sorted() is stable, so equal brands keep their snapshot order
    return sorted(out, key=lambda i: (not i.is_low_stock, i.brand))
