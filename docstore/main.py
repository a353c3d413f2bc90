# docstore/main.py
import uvicorn
from fastapi import FastAPI, Body, Depends, Header, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from typing import Optional, Dict, Any

from .config import settings
from .models import SessionOut, DocumentOut, SnapshotOut, split_path, is_collection_path
from .logic import (
    anonymous_sign_in_logic, require_session, sign_out_logic,
    list_collection_logic, add_document_logic, get_document_logic,
    set_document_logic, update_document_logic, delete_document_logic,
    listen_logic, reset_all_logic
)

app = FastAPI(title="docstore (in-memory document store)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Auth endpoints
# ---------------------------
@app.post("/auth/anonymous", status_code=201, response_model=SessionOut)
async def sign_in_anonymously():
    return await anonymous_sign_in_logic()

@app.post("/auth/signout")
async def sign_out(authorization: Optional[str] = Header(None)):
    return await sign_out_logic(authorization)

# ---------------------------
# Collections & documents
# ---------------------------
@app.get("/v1/{path:path}")
async def read_path(path: str, uid: str = Depends(require_session)):
    # collections and documents share the prefix; depth decides which one
    if is_collection_path(split_path(path)):
        return SnapshotOut(**await list_collection_logic(path))
    return DocumentOut(**await get_document_logic(path))

@app.post("/v1/{path:path}", status_code=201, response_model=DocumentOut)
async def add_document(path: str, data: Dict[str, Any] = Body(...), uid: str = Depends(require_session)):
    return await add_document_logic(path, data)

@app.put("/v1/{path:path}", response_model=DocumentOut)
async def set_document(path: str, data: Dict[str, Any] = Body(...), uid: str = Depends(require_session)):
    return await set_document_logic(path, data)

@app.patch("/v1/{path:path}", response_model=DocumentOut)
async def update_document(path: str, fields: Dict[str, Any] = Body(...), uid: str = Depends(require_session)):
    return await update_document_logic(path, fields)

@app.delete("/v1/{path:path}", status_code=204)
async def delete_document(path: str, uid: str = Depends(require_session)):
    await delete_document_logic(path)
    return Response(status_code=204)

# ---------------------------
# Real-time snapshots (server-sent events)
# ---------------------------
@app.get("/listen/{path:path}")
async def listen(path: str, limit: Optional[int] = Query(None, ge=1), uid: str = Depends(require_session)):
    events = await listen_logic(path, limit)
    return StreamingResponse(events, media_type="text/event-stream")

# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    return await reset_all_logic()


if __name__ == "__main__":
    import logging
    from rich.logging import RichHandler

    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler()])
    uvicorn.run("docstore.main:app", host=settings.host, port=settings.port)
