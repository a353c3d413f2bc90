"""Client-side mirror of the battery collection.

The store is the only source of truth. Every snapshot it pushes replaces the
local list wholesale, after which the filtered view is recomputed and
listeners are notified. Mutations go straight to the store, and the document
the store returns for a write is folded into the mirror at once, so later
reads and adjustments start from the written value before its snapshot lands.
"""

import logging
import threading
import uuid
from collections import deque
from typing import Optional, Dict, Any, List, Deque

from .client import StoreClient
from .config import settings
from .filters import FilterState, apply_filters
from .models import BatteryItem, ActivityEntry, utcnow
from .notify import ChangeNotifier
from .stats import InventoryStats, compute_stats

logger = logging.getLogger(__name__)

ACTIVITY_LIMIT = 20


class InsufficientStockError(ValueError):
    def __init__(self, item: BatteryItem, delta: int):
        self.item = item
        self.delta = delta
        super().__init__(
            f"cannot adjust {item.label} by {delta}: only {item.quantity} in stock"
        )


class InventoryState(ChangeNotifier):
    def __init__(self, client: StoreClient, user_id: Optional[str],
                 collection_path: Optional[str] = None):
        super().__init__()
        self.client = client
        self.user_id = user_id
        self.collection_path = collection_path or settings.collection_path
        self.filters = FilterState()

        self._items: List[BatteryItem] = []
        self._filtered: List[BatteryItem] = []
        self._activity: Deque[ActivityEntry] = deque(maxlen=ACTIVITY_LIMIT)
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ---------------------------
    # Views
    # ---------------------------
    @property
    def items(self) -> List[BatteryItem]:
        with self._lock:
            return list(self._filtered)

    @property
    def all_items(self) -> List[BatteryItem]:
        with self._lock:
            return list(self._items)

    @property
    def activities(self) -> List[ActivityEntry]:
        return list(self._activity)

    @property
    def low_stock_only(self) -> bool:
        return self.filters.low_stock_only

    def stats(self) -> InventoryStats:
        return compute_stats(self.all_items)

    def get_item(self, item_id: str) -> BatteryItem:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        raise KeyError(item_id)

    # ---------------------------
    # Sync
    # ---------------------------
    def apply_snapshot(self, snapshot: Dict[str, Any]):
        items = [BatteryItem.from_document(d["id"], d.get("data")) for d in snapshot.get("docs", [])]
        with self._lock:
            self._items = items
        logger.debug("snapshot of %s: %d items", self.collection_path, len(items))
        self._apply_filters()

    def _fold(self, doc: Dict[str, Any]):
        # apply the store's copy of one written document ahead of its snapshot
        item = BatteryItem.from_document(doc["id"], doc.get("data"))
        with self._lock:
            for index, existing in enumerate(self._items):
                if existing.id == item.id:
                    self._items[index] = item
                    break
            else:
                self._items.append(item)
        self._apply_filters()

    def _drop(self, item_id: str):
        with self._lock:
            self._items = [i for i in self._items if i.id != item_id]
        self._apply_filters()

    def refresh(self):
        self.apply_snapshot(self.client.list_documents(self.collection_path))

    def start(self) -> bool:
        """Subscribe to the collection on a background thread. Returns False when signed out."""
        if self.user_id is None:
            logger.warning("not subscribing to %s: no signed-in user", self.collection_path)
            return False
        # a stopped thread still blocked on the stream is picked up again
        self._stop.clear()
        if self._thread is not None and self._thread.is_alive():
            return True
        self._thread = threading.Thread(target=self._run_subscription, name="inventory-sync", daemon=True)
        self._thread.start()
        return True

    def stop(self):
        # the thread exits once the next snapshot arrives or the stream closes
        self._stop.set()

    def _run_subscription(self):
        try:
            for snapshot in self.client.listen(self.collection_path):
                if self._stop.is_set():
                    break
                self.apply_snapshot(snapshot)
        except Exception:
            logger.exception("subscription to %s ended", self.collection_path)

    # ---------------------------
    # Filters
    # ---------------------------
    def set_search_query(self, query: str):
        self.filters.search = query
        self._apply_filters()

    def set_type_filter(self, type_filter: Optional[str]):
        self.filters.type_filter = type_filter
        self._apply_filters()

    def toggle_low_stock_filter(self):
        self.filters.low_stock_only = not self.filters.low_stock_only
        self._apply_filters()

    def _apply_filters(self):
        with self._lock:
            self._filtered = apply_filters(
                self._items,
                search=self.filters.search,
                type_filter=self.filters.type_filter,
                low_stock_only=self.filters.low_stock_only,
            )
        self.notify_listeners()

    # ---------------------------
    # Mutations
    # ---------------------------
    def _signed_in(self, operation: str) -> bool:
        if self.user_id is None:
            logger.warning("ignoring %s: no signed-in user", operation)
            return False
        return True

    def _doc_path(self, item_id: str) -> str:
        return f"{self.collection_path}/{item_id}"

    def _stamped(self, item: BatteryItem) -> Dict[str, Any]:
        data = item.to_document()
        data["lastUpdated"] = utcnow().isoformat()
        return data

    def add_item(self, item: BatteryItem) -> Optional[str]:
        if not self._signed_in("add_item"):
            return None
        created = self.client.add_document(self.collection_path, self._stamped(item))
        self._fold(created)
        logger.info("added %s as %s", item.label, created["id"])
        self._log_activity("Added", item.label)
        return created["id"]

    def update_item(self, item: BatteryItem):
        if not self._signed_in("update_item"):
            return None
        if not item.id:
            raise ValueError("cannot update an item without an id")
        self._fold(self.client.update_document(self._doc_path(item.id), self._stamped(item)))
        logger.info("updated %s (%s)", item.label, item.id)
        self._log_activity("Updated", item.label)

    def delete_item(self, item_id: str):
        if not self._signed_in("delete_item"):
            return None
        self.client.delete_document(self._doc_path(item_id))
        self._drop(item_id)
        logger.info("deleted %s", item_id)
        self._log_activity("Deleted", "Item removed from inventory")

    def adjust_quantity(self, item_id: str, delta: int) -> Optional[int]:
        """Add ``delta`` to an item's stock and return the new quantity.

        The item is looked up in the local mirror. A result below zero raises
        InsufficientStockError before anything is sent to the store.
        """
        if not self._signed_in("adjust_quantity"):
            return None
        item = self.get_item(item_id)
        new_quantity = item.quantity + delta
        if new_quantity < 0:
            raise InsufficientStockError(item, delta)

        self._fold(self.client.update_document(self._doc_path(item_id), {
            "quantity": new_quantity,
            "lastUpdated": utcnow().isoformat(),
        }))
        sign = "+" if delta > 0 else ""
        logger.info("adjusted %s by %s%d to %d", item.label, sign, delta, new_quantity)
        self._log_activity("Stock In" if delta > 0 else "Stock Out", f"{item.label} ({sign}{delta})")
        return new_quantity

    # ---------------------------
    # Activity log (session only)
    # ---------------------------
    def _log_activity(self, action: str, description: str):
        self._activity.appendleft(ActivityEntry(
            id=uuid.uuid4().hex,
            action=action,
            description=description,
        ))
        self.notify_listeners()
