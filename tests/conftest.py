import pytest
from fastapi.testclient import TestClient

from docstore.main import app
from batterybuddy.client import StoreClient
from batterybuddy.models import BatteryItem
from batterybuddy.state import InventoryState

COLLECTION = "artifacts/test/public/data/batteries"


@pytest.fixture
def store():
    http = TestClient(app)
    http.post("/reset")
    return StoreClient(http=http)


@pytest.fixture
def signed_in(store):
    store.sign_in_anonymously()
    return store


@pytest.fixture
def inventory(signed_in):
    return InventoryState(signed_in, "user-1", collection_path=COLLECTION)


def make_item(brand="Duracell", model="Plus", type="AA", quantity=10, threshold=5, **kw):
    return BatteryItem(brand=brand, model=model, type=type, quantity=quantity,
                       min_stock_threshold=threshold, **kw)
