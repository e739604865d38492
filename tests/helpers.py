"""Test doubles for the document store."""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, Set

from app.domains.documents.errors import DocumentStoreError
from app.infrastructure.memory_store import MemoryDocumentStore


class FakeClock:
    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now += timedelta(seconds=seconds)


class GatedStore(MemoryDocumentStore):
    """Reads and sets of a gated path block until its event is set."""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.gates: Dict[str, asyncio.Event] = {}

    def gate(self, path: str) -> asyncio.Event:
        return self.gates.setdefault(path, asyncio.Event())

    async def _wait(self, path: str) -> None:
        event = self.gates.get(path)
        if event is not None:
            await event.wait()

    async def get(self, path):
        await self._wait(path)
        return await super().get(path)

    async def set(self, path, fields, merge=False, defaults=None):
        await self._wait(path)
        return await super().set(path, fields, merge=merge, defaults=defaults)


class CountingStore(MemoryDocumentStore):
    def __init__(self, documents=None):
        super().__init__(documents)
        self.subscribe_calls = 0

    async def subscribe(self, target, on_next, on_error):
        self.subscribe_calls += 1
        return await super().subscribe(target, on_next, on_error)


class FailingStore(MemoryDocumentStore):
    """Every operation named in ``failing`` raises a store error."""

    def __init__(self, failing: Set[str], code: str = "unavailable", documents=None):
        super().__init__(documents)
        self.failing = failing
        self.code = code

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise DocumentStoreError(self.code, f"{operation} failed")

    async def get(self, path):
        self._check("get")
        return await super().get(path)

    async def get_all(self, collection_path):
        self._check("get_all")
        return await super().get_all(collection_path)

    async def add(self, collection_path, fields):
        self._check("add")
        return await super().add(collection_path, fields)

    async def set(self, path, fields, merge=False, defaults=None):
        self._check("set")
        return await super().set(path, fields, merge=merge, defaults=defaults)

    async def update(self, path, fields):
        self._check("update")
        return await super().update(path, fields)

    async def delete(self, path):
        self._check("delete")
        return await super().delete(path)


class CorruptStore(MemoryDocumentStore):
    """Reads fail with a non-store exception, as when stored data cannot be decoded."""

    async def get(self, path):
        raise ValueError("Invalid isoformat string: 'garbage'")

    async def get_all(self, collection_path):
        raise ValueError("Invalid isoformat string: 'garbage'")
