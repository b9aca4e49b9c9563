"""montydb document store adapter with an async wrapper."""

import asyncio
import logging
import threading
from types import TracebackType
from typing import Any, Callable, Mapping, Optional, Self, Sequence, TypeVar

from montydb import MontyClient

from docservice.config import StoreConfig
from docservice.errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEMORY_REPOSITORY = ":memory:"


class Datastore:
    """Async wrapper around a single montydb collection.

    Every store call runs in a worker thread. Calls are serialized on an
    internal lock because montydb storage engines are not thread-safe.
    """

    def __init__(
        self,
        name: str,
        config: Optional[StoreConfig] = None,
        autoload: bool = True,
    ) -> None:
        self._name = name
        self._config = config or StoreConfig()
        self._client: Optional[MontyClient] = None
        self._lock = threading.Lock()
        if autoload:
            self._open()

    @property
    def name(self) -> str:
        return self._name

    @property
    def in_memory(self) -> bool:
        return self._config.path is None

    @property
    def collection(self):
        """Native montydb collection."""
        if self._client is None:
            raise RuntimeError("Datastore not loaded. Call load() first.")
        return self._client[self._config.database][self._name]

    def _open(self) -> None:
        if self._client is not None:
            return
        if self._config.path is None:
            repository = MEMORY_REPOSITORY
        else:
            self._config.path.mkdir(parents=True, exist_ok=True)
            repository = str(self._config.path)
        self._client = MontyClient(repository)
        logger.info("Opened datastore %s at %s", self._name, repository)

    async def _call(self, fn: Callable[[], T]) -> T:
        def _locked() -> T:
            with self._lock:
                try:
                    return fn()
                except Exception as e:
                    raise StoreError(f"Datastore {self._name}: {e}") from e

        return await asyncio.to_thread(_locked)

    async def load(self) -> None:
        """Open the underlying client if it is not open yet."""
        await asyncio.to_thread(self._open)

    async def close(self) -> None:
        """Close the underlying client, flushing file-backed storage."""

        def _close() -> None:
            if self._client is not None:
                self._client.close()
                self._client = None
                logger.info("Closed datastore %s", self._name)

        await asyncio.to_thread(_close)

    async def insert(self, documents: Sequence[Mapping[str, Any]]) -> list[Any]:
        """Insert documents in order and return their store ids."""
        if not documents:
            return []
        collection = self.collection
        docs = [dict(doc) for doc in documents]
        result = await self._call(lambda: collection.insert_many(docs))
        logger.debug("Inserted %d documents into %s", len(docs), self._name)
        return list(result.inserted_ids)

    async def find(
        self,
        filter: Mapping[str, Any],
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[list[tuple[str, int]]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Return all documents matching a native filter."""
        collection = self.collection

        def _find() -> list[dict[str, Any]]:
            cursor = collection.find(dict(filter), dict(projection) if projection else None)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return [dict(doc) for doc in cursor]

        logger.debug(
            "find %s filter=%s sort=%s skip=%s limit=%s", self._name, filter, sort, skip, limit
        )
        return await self._call(_find)

    async def count(self, filter: Mapping[str, Any]) -> int:
        collection = self.collection
        return await self._call(lambda: collection.count_documents(dict(filter)))

    async def update(self, filter: Mapping[str, Any], update: Mapping[str, Any]) -> int:
        """Apply a modifier document to every match; returns the match count."""
        collection = self.collection
        result = await self._call(lambda: collection.update_many(dict(filter), dict(update)))
        return result.matched_count

    async def replace(self, filter: Mapping[str, Any], replacement: Mapping[str, Any]) -> int:
        """Replace the first match; returns the match count."""
        collection = self.collection
        result = await self._call(
            lambda: collection.replace_one(dict(filter), dict(replacement))
        )
        return result.matched_count

    async def remove(self, filter: Mapping[str, Any]) -> int:
        collection = self.collection
        result = await self._call(lambda: collection.delete_many(dict(filter)))
        return result.deleted_count

    async def __aenter__(self) -> Self:
        await self.load()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()
