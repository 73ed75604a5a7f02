"""
Paint Matcher Result Store
Keyed storage of extracted colors per analysis, with LRU eviction and TTL.

The store is owned by the caller (the FastAPI app keeps one on ``app.state``)
rather than living in module-level state.
"""
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Optional, Tuple

from loguru import logger

from paintmatch.errors import ResultNotFound
from paintmatch.services.colors.models import ExtractedColor


@dataclass(frozen=True)
class StoredAnalysis:
    """Extracted colors for one uploaded photo."""
    image_id: str
    extracted_colors: Tuple[ExtractedColor, ...]
    created_at: float = field(default_factory=time.time)
    image_data_url: Optional[str] = None


class ResultStore(ABC):
    """Abstract base class for analysis stores."""

    @abstractmethod
    def put(self, analysis: StoredAnalysis) -> None:
        """Store an analysis under its image ID."""
        pass

    @abstractmethod
    def get(self, image_id: str) -> StoredAnalysis:
        """Fetch an analysis; raises ResultNotFound when missing or expired."""
        pass

    @abstractmethod
    def delete(self, image_id: str) -> bool:
        """Delete an analysis."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all analyses."""
        pass


class InMemoryResultStore(ResultStore):
    """Thread-safe in-memory LRU store with per-entry expiry."""

    def __init__(self, max_size: int = 1000, ttl: int = 86400,
                 clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._lock = Lock()
        self._entries: "OrderedDict[str, Tuple[float, StoredAnalysis]]" = OrderedDict()

    def put(self, analysis: StoredAnalysis) -> None:
        with self._lock:
            self._entries.pop(analysis.image_id, None)
            self._entries[analysis.image_id] = (self._clock() + self.ttl, analysis)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted analysis {evicted} (store full)")
        logger.info(f"Stored analysis {analysis.image_id} with {len(analysis.extracted_colors)} colors")

    def get(self, image_id: str) -> StoredAnalysis:
        with self._lock:
            entry = self._entries.get(image_id)
            if entry is None:
                raise ResultNotFound(image_id)

            expires, analysis = entry
            if expires <= self._clock():
                del self._entries[image_id]
                logger.debug(f"Analysis {image_id} expired")
                raise ResultNotFound(image_id)

            self._entries.move_to_end(image_id)
            return analysis

    def delete(self, image_id: str) -> bool:
        with self._lock:
            return self._entries.pop(image_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
