# tests/test_docstore.py
import json
from fastapi.testclient import TestClient
from docstore.main import app
from docstore import database

client = TestClient(app)

COLL = "artifacts/demo/public/data/batteries"

def reset():
    client.post("/reset")

def auth_headers():
    token = client.post("/auth/anonymous").json()["token"]
    return {"Authorization": f"Bearer {token}"}

def test_anonymous_session_lifecycle():
    reset()
    r = client.post("/auth/anonymous")
    assert r.status_code == 201
    session = r.json()
    assert session["uid"] and session["token"]
    headers = {"Authorization": f"Bearer {session['token']}"}

    assert client.get(f"/v1/{COLL}", headers=headers).status_code == 200
    assert client.post("/auth/signout", headers=headers).status_code == 200
    assert client.get(f"/v1/{COLL}", headers=headers).status_code == 401

def test_data_routes_require_session():
    reset()
    assert client.get(f"/v1/{COLL}").status_code == 401
    assert client.get(f"/v1/{COLL}", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.post(f"/v1/{COLL}", json={"brand": "x"}).status_code == 401
    assert client.get(f"/listen/{COLL}").status_code == 401

def test_add_get_and_list_documents():
    reset()
    h = auth_headers()
    r1 = client.post(f"/v1/{COLL}", json={"brand": "Duracell", "quantity": 4}, headers=h)
    r2 = client.post(f"/v1/{COLL}", json={"brand": "Energizer", "quantity": 9}, headers=h)
    assert r1.status_code == 201
    first_id = r1.json()["id"]
    assert first_id != r2.json()["id"]

    doc = client.get(f"/v1/{COLL}/{first_id}", headers=h).json()
    assert doc == {"id": first_id, "data": {"brand": "Duracell", "quantity": 4}}

    snap = client.get(f"/v1/{COLL}", headers=h).json()
    assert snap["path"] == COLL
    assert [d["data"]["brand"] for d in snap["docs"]] == ["Duracell", "Energizer"]
    assert snap["read_time"]

def test_empty_collection_lists_nothing():
    reset()
    snap = client.get(f"/v1/{COLL}", headers=auth_headers()).json()
    assert snap["docs"] == []

def test_patch_merges_fields_and_needs_existing_document():
    reset()
    h = auth_headers()
    doc_id = client.post(f"/v1/{COLL}", json={"brand": "Duracell", "quantity": 4}, headers=h).json()["id"]

    r = client.patch(f"/v1/{COLL}/{doc_id}", json={"quantity": 7}, headers=h)
    assert r.status_code == 200
    assert r.json()["data"] == {"brand": "Duracell", "quantity": 7}

    missing = client.patch(f"/v1/{COLL}/does-not-exist", json={"quantity": 1}, headers=h)
    assert missing.status_code == 404

def test_put_overwrites_whole_document():
    reset()
    h = auth_headers()
    r = client.put("/v1/config/battery_types", json={"types": ["AA"], "extra": 1}, headers=h)
    assert r.status_code == 200
    client.put("/v1/config/battery_types", json={"types": ["AAA"]}, headers=h)
    doc = client.get("/v1/config/battery_types", headers=h).json()
    assert doc["data"] == {"types": ["AAA"]}

def test_delete_document():
    reset()
    h = auth_headers()
    doc_id = client.post(f"/v1/{COLL}", json={"brand": "x"}, headers=h).json()["id"]
    assert client.delete(f"/v1/{COLL}/{doc_id}", headers=h).status_code == 204
    assert client.get(f"/v1/{COLL}/{doc_id}", headers=h).status_code == 404
    # deleting again is not an error
    assert client.delete(f"/v1/{COLL}/{doc_id}", headers=h).status_code == 204

def test_path_depth_is_checked():
    reset()
    h = auth_headers()
    assert client.post("/v1/config/battery_types", json={"a": 1}, headers=h).status_code == 400
    assert client.patch(f"/v1/{COLL}", json={"a": 1}, headers=h).status_code == 400
    assert client.delete(f"/v1/{COLL}", headers=h).status_code == 400
    assert client.get("/listen/config/battery_types", headers=h).status_code == 400

def test_listen_starts_with_current_snapshot():
    reset()
    h = auth_headers()
    client.post(f"/v1/{COLL}", json={"brand": "Duracell"}, headers=h)

    r = client.get(f"/listen/{COLL}", params={"limit": 1}, headers=h)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/event-stream")
    events = [json.loads(line[len("data: "):]) for line in r.text.splitlines() if line.startswith("data: ")]
    assert len(events) == 1
    assert [d["data"]["brand"] for d in events[0]["docs"]] == ["Duracell"]
    # the stream unregistered itself when it closed
    assert database.listener_count(COLL) == 0

def test_writes_push_snapshots_to_subscribers():
    reset()
    h = auth_headers()
    queue = database.subscribe(COLL)
    try:
        doc_id = client.post(f"/v1/{COLL}", json={"brand": "Duracell", "quantity": 2}, headers=h).json()["id"]
        client.patch(f"/v1/{COLL}/{doc_id}", json={"quantity": 3}, headers=h)
        client.delete(f"/v1/{COLL}/{doc_id}", headers=h)
        # writes elsewhere are not pushed here
        client.put("/v1/config/battery_types", json={"types": []}, headers=h)

        pushed = [queue.get_nowait() for _ in range(queue.qsize())]
    finally:
        database.unsubscribe(COLL, queue)

    assert len(pushed) == 3
    assert pushed[0]["docs"][0]["data"]["quantity"] == 2
    assert pushed[1]["docs"][0]["data"]["quantity"] == 3
    assert pushed[2]["docs"] == []

def test_listen_limit_must_be_positive():
    reset()
    r = client.get(f"/listen/{COLL}", params={"limit": 0}, headers=auth_headers())
    assert r.status_code == 422
