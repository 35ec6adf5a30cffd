"""Content resolvers: locator -> stored raw content

Resolvers only look content up in local stores. They never fetch remote pages.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

import yaml

from content_valuator.models.features import RawContent
from content_valuator.utils.logger import get_logger

logger = get_logger(__name__)


def locator_path(locator: str) -> str:
    """Path part of a locator; "/blog/x?y=1" and "https://site/blog/x" both give "/blog/x"."""
    if not locator:
        return ""
    try:
        path = urlparse(locator).path
    except ValueError:
        return locator
    return path or ""


class ContentResolver(ABC):
    """Base class of every content source consulted by the feature extractor."""

    @abstractmethod
    def resolve(self, locator: str) -> Optional[RawContent]:
        """Return the stored content for a locator, or None when unknown."""
        ...


class MappingContentResolver(ContentResolver):
    """
    Dictionary-backed resolver.

    Keys may be full locators or bare paths; a full-locator key wins over a
    path key.
    """

    def __init__(self, contents: Optional[Mapping[str, Union[RawContent, Dict[str, Any]]]] = None) -> None:
        self._contents: Dict[str, RawContent] = {}
        for key, value in (contents or {}).items():
            self.add(key, value)

    def add(self, key: str, content: Union[RawContent, Dict[str, Any]]) -> None:
        if isinstance(content, dict):
            content = RawContent.from_dict(content)
        self._contents[key] = content

    def resolve(self, locator: str) -> Optional[RawContent]:
        if not locator:
            return None
        if locator in self._contents:
            return self._contents[locator]
        path = locator_path(locator)
        if path and path != "/":
            return self._contents.get(path) or self._contents.get(path.rstrip("/"))
        return None

    def __len__(self) -> int:
        return len(self._contents)


class YamlContentResolver(MappingContentResolver):
    """
    Resolver backed by a YAML index file:

        contents:
          /research/llm-eval:
            title: "..."
            body: "<h2>...</h2>..."
            publish_date: "2026-01-10"
            tags: [ai, evaluation]
    """

    def __init__(self, index_path: str) -> None:
        super().__init__()
        self._index_path = index_path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self._index_path):
            logger.warning("Content index not found: %s", self._index_path)
            return
        with open(self._index_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        for key, entry in (data.get("contents") or {}).items():
            self.add(str(key), entry or {})
        logger.info("Content index loaded: %d entries from %s", len(self), self._index_path)
