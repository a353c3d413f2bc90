from datetime import datetime, timezone
from pydantic import BaseModel
from typing import Dict, Any, List, Tuple

class SessionOut(BaseModel):
    uid: str
    token: str

class DocumentOut(BaseModel):
    id: str
    data: Dict[str, Any]

class SnapshotOut(BaseModel):
    path: str
    docs: List[DocumentOut]
    read_time: str

def _make_document_dict(doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": doc_id,
        "data": data
    }

def _make_snapshot_dict(path: str, docs: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "path": path,
        "docs": docs,
        "read_time": datetime.now(timezone.utc).isoformat()
    }

def split_path(path: str) -> Tuple[str, ...]:
    """Split a slash separated store path, ignoring leading/trailing slashes.

    Empty segments in the middle of a path are kept so callers can reject them.
    """
    return tuple(path.strip("/").split("/")) if path.strip("/") else ()

def is_collection_path(segments: Tuple[str, ...]) -> bool:
    # collection/doc/collection/... : collections sit at odd depths
    return len(segments) % 2 == 1

def parent_and_id(segments: Tuple[str, ...]) -> Tuple[str, str]:
    return "/".join(segments[:-1]), segments[-1]
