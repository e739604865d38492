"""
Tests for one-shot fetchers.
"""

import asyncio

import pytest

from app.domains.documents.accessors import (
    CollectionFetcher, DocumentFetcher, LoadStatus, QueryFetcher
)
from app.domains.documents.entities import Query
from app.domains.documents.errors import DOCUMENT_NOT_FOUND
from app.infrastructure.memory_store import MemoryDocumentStore
from tests.helpers import CorruptStore, FailingStore, GatedStore


@pytest.mark.asyncio
async def test_document_fetcher_loads_document():
    store = MemoryDocumentStore({"emailTemplates/welcome": {"subject": "Hi"}})
    fetcher = DocumentFetcher(store)

    assert fetcher.status == LoadStatus.PENDING
    assert fetcher.loading

    await fetcher.fetch("emailTemplates/welcome")

    assert fetcher.status == LoadStatus.READY
    assert not fetcher.loading
    assert fetcher.error is None
    assert fetcher.data.data == {"subject": "Hi"}


@pytest.mark.asyncio
async def test_missing_document_is_an_explicit_error(store):
    fetcher = DocumentFetcher(store)

    await fetcher.fetch("emailTemplates/missing")

    assert fetcher.data is None
    assert fetcher.error == DOCUMENT_NOT_FOUND
    assert fetcher.error.to_dict() == {"code": "doc-not-found", "message": "No document found."}
    assert fetcher.status == LoadStatus.FAILED


@pytest.mark.asyncio
async def test_empty_collection_is_not_an_error(store):
    fetcher = CollectionFetcher(store)

    await fetcher.fetch("emailTemplates")

    assert fetcher.data == []
    assert fetcher.error is None
    assert fetcher.status == LoadStatus.READY
    assert not fetcher.loading


@pytest.mark.asyncio
async def test_query_fetcher_filters_documents():
    store = MemoryDocumentStore({
        "emailTemplates/u1_a": {"createdBy": {"id": "u1"}},
        "emailTemplates/u2_b": {"createdBy": {"id": "u2"}},
    })
    fetcher = QueryFetcher(store)

    await fetcher.fetch(Query("emailTemplates").where("createdBy.id", "==", "u2"))

    assert [doc.id for doc in fetcher.data] == ["u2_b"]


@pytest.mark.asyncio
async def test_store_failure_is_recorded():
    fetcher = DocumentFetcher(FailingStore({"get"}))

    await fetcher.fetch("emailTemplates/welcome")

    assert fetcher.data is None
    assert fetcher.error.code == "unavailable"
    assert fetcher.status == LoadStatus.FAILED


@pytest.mark.asyncio
async def test_same_key_does_not_refetch(store):
    fetcher = CollectionFetcher(store)

    first = fetcher.fetch("emailTemplates")
    second = fetcher.fetch("emailTemplates")
    await first

    assert first is second


@pytest.mark.asyncio
async def test_refresh_reloads_current_key(store):
    fetcher = CollectionFetcher(store)
    await fetcher.fetch("emailTemplates")
    await store.set("emailTemplates/welcome", {"subject": "Hi"})

    await fetcher.fetch("emailTemplates")
    assert fetcher.data == []

    await fetcher.refresh()
    assert [doc.id for doc in fetcher.data] == ["welcome"]


@pytest.mark.asyncio
async def test_superseded_fetch_result_is_discarded():
    store = GatedStore({
        "emailTemplates/a": {"subject": "A"},
        "emailTemplates/b": {"subject": "B"},
    })
    gate_a = store.gate("emailTemplates/a")
    fetcher = DocumentFetcher(store)

    task_a = fetcher.fetch("emailTemplates/a")
    await asyncio.sleep(0)
    task_b = fetcher.fetch("emailTemplates/b")
    await task_b

    gate_a.set()
    await task_a

    assert fetcher.key == "emailTemplates/b"
    assert fetcher.data.data == {"subject": "B"}
    assert fetcher.status == LoadStatus.READY


@pytest.mark.asyncio
async def test_on_change_reports_pending_then_ready(store):
    statuses = []
    fetcher = CollectionFetcher(store, on_change=lambda f: statuses.append(f.status))

    await fetcher.fetch("emailTemplates")

    assert statuses == [LoadStatus.PENDING, LoadStatus.READY]


@pytest.mark.asyncio
async def test_unexpected_store_exception_is_reported():
    fetcher = DocumentFetcher(CorruptStore())

    await fetcher.fetch("emailTemplates/welcome")

    assert fetcher.status == LoadStatus.FAILED
    assert not fetcher.loading
    assert fetcher.error.code == "unknown"
    assert "garbage" in fetcher.error.message
