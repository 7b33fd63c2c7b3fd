"""Memoized chunk sets keyed by category and source.

A ChunkManager owns one key space per ChunkCategory. Sets are produced lazily
on first access and live until explicitly cleared; there is no TTL or
eviction. Concurrent first accesses for the same key share one in-flight
task, so a producer runs at most once per key.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Union

from toolframe.foundation.config import DEFAULT_MAX_CHUNK_SIZE

from .chunks import ChunkCategory, ChunkSet, ContentChunk, create_chunk_summary, get_chunk

ChunkProducer = Callable[[], Union[Iterable[ContentChunk], Awaitable[Iterable[ContentChunk]]]]


class ChunkManager:
    """Per-category cache of chunk sets.

    Args:
        max_chunk_size: Character budget capabilities use when building chunks

    Example:
        >>> manager = ChunkManager()
        >>> chunks = await manager.get_or_create(
        ...     ChunkCategory.FILE, "notes.txt",
        ...     lambda: create_file_chunks(text, "notes.txt", manager.max_chunk_size),
        ... )
        >>> manager.get_chunk(chunks, 1).index
        1
    """

    __slots__ = ("_stores", "_pending", "_max_chunk_size")

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> None:
        if max_chunk_size < 1:
            raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
        self._max_chunk_size = max_chunk_size
        self._stores: dict[ChunkCategory, dict[str, ChunkSet]] = {c: {} for c in ChunkCategory}
        self._pending: dict[ChunkCategory, dict[str, asyncio.Task[ChunkSet]]] = {c: {} for c in ChunkCategory}

    @property
    def max_chunk_size(self) -> int:
        return self._max_chunk_size

    async def get_or_create(self, category: ChunkCategory | str, key: str, producer: ChunkProducer) -> ChunkSet:
        """Cached set for key, invoking producer (sync or async) on a miss.

        Producer failures propagate and leave the cache unpopulated.
        """
        category = ChunkCategory(category)
        if (cached := self._stores[category].get(key)) is not None:
            return cached
        pending = self._pending[category]
        task = pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._produce(category, key, producer))
            pending[key] = task
        return await asyncio.shield(task)

    async def _produce(self, category: ChunkCategory, key: str, producer: ChunkProducer) -> ChunkSet:
        try:
            result = producer()
            if inspect.isawaitable(result):
                result = await result
            chunks: ChunkSet = tuple(result)
            self._stores[category][key] = chunks
            return chunks
        finally:
            self._pending[category].pop(key, None)

    def get_cached(self, category: ChunkCategory | str, key: str) -> ChunkSet | None:
        return self._stores[ChunkCategory(category)].get(key)

    @staticmethod
    def get_chunk(chunks: Sequence[ContentChunk], index: int) -> ContentChunk:
        return get_chunk(chunks, index)

    @staticmethod
    def create_chunk_summary(chunks: Sequence[ContentChunk]) -> str:
        return create_chunk_summary(chunks)

    def clear(self, category: ChunkCategory | str, key: str) -> bool:
        """Drop one cached set. Returns whether it existed."""
        return self._stores[ChunkCategory(category)].pop(key, None) is not None

    def clear_all(self, category: ChunkCategory | str) -> None:
        self._stores[ChunkCategory(category)].clear()

    def store_size(self, category: ChunkCategory | str) -> int:
        return len(self._stores[ChunkCategory(category)])

    def __repr__(self) -> str:
        sizes = ", ".join(f"{c.value}={len(s)}" for c, s in self._stores.items())
        return f"ChunkManager({sizes})"
