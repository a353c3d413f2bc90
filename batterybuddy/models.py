from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any

DEFAULT_THRESHOLD = 5

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _field(data: Dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value

def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return utcnow()


class BatteryItem(BaseModel):
    id: str = ""
    brand: str
    model: str
    type: str
    location: str = "Unsorted"
    quantity: int = 0
    min_stock_threshold: int = DEFAULT_THRESHOLD
    last_updated: datetime = Field(default_factory=utcnow)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock_threshold

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model}"

    def to_document(self) -> Dict[str, Any]:
        return {
            "brand": self.brand,
            "model": self.model,
            "type": self.type,
            "location": self.location,
            "quantity": self.quantity,
            "minStockThreshold": self.min_stock_threshold,
            "lastUpdated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_document(cls, doc_id: str, data: Optional[Dict[str, Any]]) -> "BatteryItem":
        """Build an item from stored fields, filling in defaults for anything missing."""
        data = data or {}
        return cls(
            id=doc_id,
            brand=_field(data, "brand", "Unknown"),
            model=_field(data, "model", "Unknown"),
            type=_field(data, "type", "Other"),
            location=_field(data, "location", "Unsorted"),
            quantity=_field(data, "quantity", 0),
            min_stock_threshold=_field(data, "minStockThreshold", DEFAULT_THRESHOLD),
            last_updated=_parse_timestamp(data.get("lastUpdated")),
        )


class ActivityEntry(BaseModel):
    id: str
    action: str  # "Added", "Updated", "Deleted", "Stock In", "Stock Out"
    description: str
    timestamp: datetime = Field(default_factory=utcnow)
