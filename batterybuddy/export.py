"""CSV export of inventory items."""

import csv
from datetime import datetime
from typing import IO, Iterable

from .models import BatteryItem

COLUMNS = [
    ("id", "id"),
    ("brand", "brand"),
    ("model", "model"),
    ("type", "type"),
    ("location", "location"),
    ("quantity", "quantity"),
    ("min_stock_threshold", "min_stock_threshold"),
    ("is_low_stock", "low_stock"),
    ("last_updated", "last_updated"),
]


def _serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def export_items_csv(items: Iterable[BatteryItem], fp: IO[str]) -> int:
    """Write ``items`` to the open text file ``fp``. Returns the number of data rows."""
    writer = csv.writer(fp)
    writer.writerow([header for _, header in COLUMNS])
    count = 0
    for item in items:
        writer.writerow([_serialize_value(getattr(item, attr)) for attr, _ in COLUMNS])
        count += 1
    return count
