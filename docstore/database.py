import asyncio
import copy
from typing import Dict, Any, List

from .models import _make_document_dict, _make_snapshot_dict

# This file holds all the in-memory data stores, listener queues and locks.

# collection path -> document id -> fields (dicts keep insertion order)
COLLECTIONS: Dict[str, Dict[str, Dict[str, Any]]] = {}
# session token -> anonymous uid
SESSIONS: Dict[str, str] = {}
_LISTENERS: Dict[str, List[asyncio.Queue]] = {}
_LOCKS: Dict[str, asyncio.Lock] = {}

def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]

def snapshot(path: str) -> Dict[str, Any]:
    docs = COLLECTIONS.get(path, {})
    return _make_snapshot_dict(
        path,
        [_make_document_dict(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]
    )

def subscribe(path: str) -> asyncio.Queue:
    queue: asyncio.Queue = asyncio.Queue()
    _LISTENERS.setdefault(path, []).append(queue)
    return queue

def unsubscribe(path: str, queue: asyncio.Queue) -> None:
    queues = _LISTENERS.get(path, [])
    if queue in queues:
        queues.remove(queue)
    if not queues:
        _LISTENERS.pop(path, None)

def listener_count(path: str) -> int:
    return len(_LISTENERS.get(path, []))

def publish(path: str) -> int:
    """Push a fresh snapshot of `path` to every subscriber. Returns how many got it."""
    queues = _LISTENERS.get(path, [])
    if not queues:
        return 0
    snap = snapshot(path)
    for queue in queues:
        queue.put_nowait(copy.deepcopy(snap))
    return len(queues)

def clear_all() -> None:
    COLLECTIONS.clear()
    SESSIONS.clear()
    _LISTENERS.clear()
    _LOCKS.clear()
