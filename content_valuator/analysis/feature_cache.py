"""Feature cache: locator -> FeatureBundle"""

import hashlib
from abc import ABC, abstractmethod
from typing import Dict, Optional

from content_valuator.models.features import FeatureBundle


def cache_key(locator: str) -> str:
    return hashlib.md5((locator or "").encode("utf-8")).hexdigest()


class FeatureCache(ABC):
    """Cache abstraction used by ContentFeatureExtractor. Entries never expire on their own."""

    @abstractmethod
    def get(self, locator: str) -> Optional[FeatureBundle]:
        ...

    @abstractmethod
    def set(self, locator: str, bundle: FeatureBundle) -> None:
        ...

    @abstractmethod
    def invalidate(self, locator: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryFeatureCache(FeatureCache):
    """Per-process dictionary cache keyed by the md5 of the locator."""

    def __init__(self) -> None:
        self._entries: Dict[str, FeatureBundle] = {}

    def get(self, locator: str) -> Optional[FeatureBundle]:
        return self._entries.get(cache_key(locator))

    def set(self, locator: str, bundle: FeatureBundle) -> None:
        self._entries[cache_key(locator)] = bundle

    def invalidate(self, locator: str) -> None:
        self._entries.pop(cache_key(locator), None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullFeatureCache(FeatureCache):
    """Cache that stores nothing; every extract call recomputes."""

    def get(self, locator: str) -> Optional[FeatureBundle]:
        return None

    def set(self, locator: str, bundle: FeatureBundle) -> None:
        pass

    def invalidate(self, locator: str) -> None:
        pass

    def clear(self) -> None:
        pass
