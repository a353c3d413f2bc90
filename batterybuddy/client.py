# batterybuddy/client.py
import json
import logging
import httpx
from typing import Optional, Dict, Any, Iterator

from .config import settings

logger = logging.getLogger(__name__)

class StoreClient:
    """Thin HTTP client for the document store.

    ``http`` may be any ``httpx.Client`` (tests hand in FastAPI's TestClient);
    otherwise one is built from ``base_url`` and ``timeout``.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[float] = None, http: Optional[httpx.Client] = None):
        self.base_url = (base_url or settings.store_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout
        self.http = http if http is not None else httpx.Client(base_url=self.base_url, timeout=self.timeout)
        self.token: Optional[str] = None
        if token:
            self.set_token(token)

    def close(self):
        self.http.close()

    def set_token(self, token: Optional[str]):
        self.token = token
        if token:
            self.http.headers["Authorization"] = f"Bearer {token}"
        else:
            self.http.headers.pop("Authorization", None)

    def _check(self, r: httpx.Response) -> httpx.Response:
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError:
            logger.error("store call %s %s failed with %s", r.request.method, r.request.url.path, r.status_code)
            raise
        return r

    # Auth
    def sign_in_anonymously(self) -> Dict[str, Any]:
        r = self._check(self.http.post("/auth/anonymous"))
        session = r.json()
        self.set_token(session["token"])
        return session

    def sign_out(self):
        self._check(self.http.post("/auth/signout"))
        self.set_token(None)

    # Collections
    def list_documents(self, path: str) -> Dict[str, Any]:
        return self._check(self.http.get(f"/v1/{path}")).json()

    def add_document(self, path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._check(self.http.post(f"/v1/{path}", json=data)).json()

    # Documents
    def get_document(self, path: str) -> Dict[str, Any]:
        return self._check(self.http.get(f"/v1/{path}")).json()

    def set_document(self, path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._check(self.http.put(f"/v1/{path}", json=data)).json()

    def update_document(self, path: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._check(self.http.patch(f"/v1/{path}", json=fields)).json()

    def delete_document(self, path: str):
        self._check(self.http.delete(f"/v1/{path}"))

    # Real-time snapshots
    def listen(self, path: str, limit: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """Yield every snapshot the store pushes for the collection at ``path``.

        The first snapshot is the current state. The stream has no read timeout;
        it ends when the server closes it or after ``limit`` snapshots.
        """
        params = {"limit": limit} if limit else {}
        with self.http.stream("GET", f"/listen/{path}", params=params, timeout=None) as r:
            self._check(r)
            for line in r.iter_lines():
                if line.startswith("data: "):
                    yield json.loads(line[len("data: "):])

    def reset(self):
        return self._check(self.http.post("/reset")).json()
