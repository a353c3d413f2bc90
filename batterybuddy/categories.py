import logging
import httpx
from typing import Iterable, Iterator, List, Optional

from .client import StoreClient
from .config import settings

logger = logging.getLogger(__name__)

OTHER = "Other"
DEFAULT_TYPES = ["AA", "AAA", "9V", "C", "D", "CR2032", "18650", OTHER]


def normalize_types(labels: Iterable[str]) -> List[str]:
    out: List[str] = []
    for label in labels:
        label = str(label).strip()
        if label and label not in out:
            out.append(label)
    if OTHER not in out:
        out.append(OTHER)
    return out


class CategoryList:
    """Permitted battery types, backed by a config document in the store.

    The list always contains ``"Other"``. Loading never fails: any store error
    falls back to ``DEFAULT_TYPES``. Edits write the whole list back.
    """

    def __init__(self, client: StoreClient, path: Optional[str] = None):
        self.client = client
        self.path = path or settings.categories_doc
        self._types: List[str] = list(DEFAULT_TYPES)

    @property
    def types(self) -> List[str]:
        return list(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self.types)

    def __contains__(self, label) -> bool:
        return label in self._types

    def __len__(self) -> int:
        return len(self._types)

    def load(self) -> List[str]:
        try:
            doc = self.client.get_document(self.path)
        except httpx.HTTPError as exc:
            logger.warning("could not load categories from %s (%s), using defaults", self.path, exc)
            self._types = list(DEFAULT_TYPES)
            return self.types

        raw = (doc.get("data") or {}).get("types")
        if not isinstance(raw, list) or not raw:
            logger.warning("categories document %s has no types, using defaults", self.path)
            self._types = list(DEFAULT_TYPES)
        else:
            self._types = normalize_types(raw)
        return self.types

    def add(self, label: str) -> List[str]:
        label = label.strip()
        if not label:
            raise ValueError("category label must not be blank")
        if label in self._types:
            return self.types
        # new labels go ahead of the "Other" catch-all
        self._types.insert(self._types.index(OTHER), label)
        self._save()
        return self.types

    def remove(self, label: str) -> List[str]:
        if label == OTHER:
            raise ValueError(f"{OTHER!r} cannot be removed")
        if label not in self._types:
            raise ValueError(f"unknown category {label!r}")
        self._types.remove(label)
        self._save()
        return self.types

    def _save(self):
        self.client.set_document(self.path, {"types": self._types})
        logger.info("saved %d categories to %s", len(self._types), self.path)
