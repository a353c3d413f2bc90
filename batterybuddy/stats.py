from dataclasses import dataclass, field
from typing import Dict, Iterable

from .models import BatteryItem


@dataclass
class InventoryStats:
    total_units: int = 0
    low_stock_count: int = 0
    total_skus: int = 0
    type_distribution: Dict[str, int] = field(default_factory=dict)


def compute_stats(items: Iterable[BatteryItem]) -> InventoryStats:
    stats = InventoryStats()
    for item in items:
        stats.total_skus += 1
        stats.total_units += item.quantity
        if item.is_low_stock:
            stats.low_stock_count += 1
        stats.type_distribution[item.type] = stats.type_distribution.get(item.type, 0) + item.quantity
    return stats
