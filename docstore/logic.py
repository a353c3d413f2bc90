import json
import logging
import uuid
from typing import Optional, Dict, Any, AsyncIterator, Tuple
from fastapi import HTTPException, Header

# Import from other modules
from .models import (
    _make_document_dict, split_path, is_collection_path, parent_and_id
)
from .database import (
    COLLECTIONS, SESSIONS, _get_lock, snapshot, subscribe,
    unsubscribe, publish, clear_all
)

# This file contains the core logic for all API endpoints.

logger = logging.getLogger(__name__)

def _segments(path: str) -> Tuple[str, ...]:
    segments = split_path(path)
    if not segments or any(not s for s in segments):
        raise HTTPException(status_code=400, detail="invalid path")
    return segments

def _collection(path: str) -> str:
    segments = _segments(path)
    if not is_collection_path(segments):
        raise HTTPException(status_code=400, detail="not a collection path")
    return "/".join(segments)

def _document(path: str) -> Tuple[str, str]:
    segments = _segments(path)
    if is_collection_path(segments):
        raise HTTPException(status_code=400, detail="not a document path")
    return parent_and_id(segments)

# Auth endpoints
async def anonymous_sign_in_logic():
    uid = uuid.uuid4().hex
    token = uuid.uuid4().hex
    SESSIONS[token] = uid
    logger.info("anonymous session started uid=%s", uid)
    return {"uid": uid, "token": token}

def _bearer(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="bearer token required")
    return authorization[len("Bearer "):].strip()

async def require_session(authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency: resolve the bearer token to a uid or reject with 401."""
    uid = SESSIONS.get(_bearer(authorization))
    if uid is None:
        raise HTTPException(status_code=401, detail="invalid session")
    return uid

async def sign_out_logic(authorization: Optional[str]):
    uid = SESSIONS.pop(_bearer(authorization), None)
    if uid is None:
        raise HTTPException(status_code=401, detail="invalid session")
    logger.info("session ended uid=%s", uid)
    return {"status": "signed out"}

# Collection endpoints
async def list_collection_logic(path: str):
    return snapshot(_collection(path))

async def add_document_logic(path: str, data: Dict[str, Any]):
    collection = _collection(path)
    doc_id = uuid.uuid4().hex
    async with _get_lock(collection):
        COLLECTIONS.setdefault(collection, {})[doc_id] = dict(data)
        publish(collection)
    return _make_document_dict(doc_id, data)

# Document endpoints
async def get_document_logic(path: str):
    collection, doc_id = _document(path)
    doc = COLLECTIONS.get(collection, {}).get(doc_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="document not found")
    return _make_document_dict(doc_id, doc)

async def set_document_logic(path: str, data: Dict[str, Any]):
    collection, doc_id = _document(path)
    async with _get_lock(collection):
        COLLECTIONS.setdefault(collection, {})[doc_id] = dict(data)
        publish(collection)
    return _make_document_dict(doc_id, data)

async def update_document_logic(path: str, fields: Dict[str, Any]):
    collection, doc_id = _document(path)
    async with _get_lock(collection):
        doc = COLLECTIONS.get(collection, {}).get(doc_id)
        if doc is None:
            raise HTTPException(status_code=404, detail="document not found")
        doc.update(fields)
        publish(collection)
        return _make_document_dict(doc_id, dict(doc))

async def delete_document_logic(path: str):
    collection, doc_id = _document(path)
    async with _get_lock(collection):
        docs = COLLECTIONS.get(collection, {})
        if docs.pop(doc_id, None) is not None:
            publish(collection)

# Real-time listener
def _format_event(snap: Dict[str, Any]) -> str:
    return f"data: {json.dumps(snap)}\n\n"

async def listen_logic(path: str, limit: Optional[int] = None) -> AsyncIterator[str]:
    collection = _collection(path)

    async def events():
        queue = subscribe(collection)
        sent = 0
        try:
            yield _format_event(snapshot(collection))
            sent += 1
            while limit is None or sent < limit:
                snap = await queue.get()
                yield _format_event(snap)
                sent += 1
        finally:
            unsubscribe(collection, queue)

    return events()

# Utility: reset (for tests/demo)
async def reset_all_logic():
    clear_all()
    return {"status": "reset"}
