from datetime import datetime, timezone

from batterybuddy.models import BatteryItem

def test_from_document_fills_defaults():
    item = BatteryItem.from_document("abc", {})
    assert item.id == "abc"
    assert (item.brand, item.model, item.type, item.location) == ("Unknown", "Unknown", "Other", "Unsorted")
    assert item.quantity == 0
    assert item.min_stock_threshold == 5
    assert item.last_updated.tzinfo is not None

def test_from_document_treats_null_as_missing_but_keeps_zero():
    item = BatteryItem.from_document("abc", {"brand": None, "quantity": 0, "minStockThreshold": 0})
    assert item.brand == "Unknown"
    assert item.min_stock_threshold == 0

def test_document_round_trip_uses_store_field_names():
    ts = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
    item = BatteryItem(id="x1", brand="Duracell", model="Plus", type="AA", location="Drawer",
                       quantity=3, min_stock_threshold=4, last_updated=ts)
    doc = item.to_document()
    assert "id" not in doc
    assert doc["minStockThreshold"] == 4
    assert doc["lastUpdated"] == "2024-03-01T12:30:00+00:00"
    assert BatteryItem.from_document("x1", doc) == item

def test_zulu_timestamps_parse():
    item = BatteryItem.from_document("a", {"lastUpdated": "2024-03-01T12:30:00Z"})
    assert item.last_updated == datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)

def test_low_stock_is_inclusive_of_threshold():
    assert BatteryItem(brand="a", model="b", type="AA", quantity=5).is_low_stock
    assert BatteryItem(brand="a", model="b", type="AA", quantity=0).is_low_stock
    assert not BatteryItem(brand="a", model="b", type="AA", quantity=6).is_low_stock
    assert not BatteryItem(brand="a", model="b", type="AA", quantity=6, min_stock_threshold=5).is_low_stock

def test_label():
    assert BatteryItem(brand="Panasonic", model="Eneloop", type="AA").label == "Panasonic Eneloop"
