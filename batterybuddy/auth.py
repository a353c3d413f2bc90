import logging
import httpx
from pydantic import BaseModel
from typing import Optional

from .client import StoreClient
from .notify import ChangeNotifier

logger = logging.getLogger(__name__)


class AnonymousUser(BaseModel):
    uid: str
    token: str


class AuthSession(ChangeNotifier):
    def __init__(self, client: StoreClient):
        super().__init__()
        self.client = client
        self.user: Optional[AnonymousUser] = None
        self.is_loading = True

    @property
    def uid(self) -> Optional[str]:
        return self.user.uid if self.user else None

    def initialize(self) -> Optional[AnonymousUser]:
        """Sign in anonymously unless a session already exists.

        Store errors are logged and leave the session signed out.
        """
        try:
            if self.user is None:
                self.sign_in_anonymously()
        except httpx.HTTPError as exc:
            logger.error("anonymous sign-in failed: %s", exc)
        finally:
            self.is_loading = False
            self.notify_listeners()
        return self.user

    def sign_in_anonymously(self) -> AnonymousUser:
        self.user = AnonymousUser(**self.client.sign_in_anonymously())
        logger.info("signed in anonymously as %s", self.user.uid)
        self.notify_listeners()
        return self.user

    def sign_out(self):
        if self.user is None:
            return
        self.client.sign_out()
        logger.info("signed out %s", self.user.uid)
        self.user = None
        self.notify_listeners()
