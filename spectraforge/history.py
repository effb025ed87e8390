"""In-memory gallery of generated artworks, newest first."""

from __future__ import annotations

import threading

from spectraforge.generator import Artwork


class ArtworkHistory:
    def __init__(self, max_items: int = 200):
        if max_items < 1:
            raise ValueError(f"max_items must be positive, got {max_items}")
        self.max_items = max_items
        self._items: list[Artwork] = []
        self._lock = threading.Lock()

    def add(self, artwork: Artwork) -> None:
        with self._lock:
            self._items.insert(0, artwork)
            if len(self._items) > self.max_items:
                self._items.pop()

    def get(self, artwork_id: str) -> Artwork | None:
        with self._lock:
            for item in self._items:
                if item.id == artwork_id:
                    return item
        return None

    @property
    def latest(self) -> Artwork | None:
        with self._lock:
            return self._items[0] if self._items else None

    def items(self) -> list[Artwork]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items = []

    def __len__(self) -> int:
        return len(self._items)
