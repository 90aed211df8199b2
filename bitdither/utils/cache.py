"""LRU cache for generated screening matrices keyed by (kind, size)."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable

import numpy as np

logger = logging.getLogger(__name__)


class MatrixCache:
    """Small LRU cache of read-only matrices.

    Keys are (kind, size) tuples. Stored arrays are frozen so callers
    sharing them cannot corrupt each other.
    """

    def __init__(self, max_size: int = 16) -> None:
        self._max_size = max_size
        self._cache: OrderedDict[tuple[str, int], np.ndarray] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, kind: str, size: int) -> np.ndarray | None:
        """Get a cached matrix, or None if not present."""
        key = (kind, size)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
        return None

    def put(self, kind: str, size: int, matrix: np.ndarray) -> np.ndarray:
        """Freeze and cache a matrix; returns the frozen array."""
        key = (kind, size)
        matrix.setflags(write=False)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self._max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted %s matrix of size %d", *evicted)
            self._cache[key] = matrix
        return matrix

    def get_or_build(
        self, kind: str, size: int, build: Callable[[int], np.ndarray]
    ) -> np.ndarray:
        cached = self.get(kind, size)
        if cached is not None:
            logger.debug("Cache hit for %s matrix of size %d", kind, size)
            return cached
        logger.debug("Cache miss; building %s matrix of size %d", kind, size)
        return self.put(kind, size, build(size))

    def clear(self) -> None:
        """Clear the entire cache."""
        with self._lock:
            self._cache.clear()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._cache)
