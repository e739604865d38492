"""
Tests for document paths, field helpers and query descriptors.
"""

import pytest

from app.domains.documents.entities import FieldFilter, Query, StoredDocument
from app.domains.documents.errors import DocumentStoreError
from app.domains.documents.fields import apply_update, get_field, merge_fields
from app.domains.documents.paths import (
    collection_path,
    document_id,
    document_path,
    generate_document_id,
    is_document_path,
    parent_collection,
)


def test_document_and_collection_paths():
    assert is_document_path("emailTemplates/welcome")
    assert not is_document_path("emailTemplates")
    assert document_path("/emailTemplates/welcome/") == "emailTemplates/welcome"
    assert collection_path("tenants/t1/emailTemplates") == "tenants/t1/emailTemplates"
    assert parent_collection("tenants/t1/emailTemplates/welcome") == "tenants/t1/emailTemplates"
    assert document_id("emailTemplates/welcome") == "welcome"


@pytest.mark.parametrize("path", ["", "/", "emailTemplates//welcome", "emailTemplates"])
def test_invalid_document_paths(path):
    with pytest.raises(DocumentStoreError) as exc_info:
        document_path(path)
    assert exc_info.value.code == "invalid-argument"


def test_collection_path_rejects_document_path():
    with pytest.raises(DocumentStoreError):
        collection_path("emailTemplates/welcome")


def test_get_field_with_dotted_path():
    data = {"createdBy": {"id": "u1", "name": None}}
    assert get_field(data, "createdBy.id") == "u1"
    assert get_field(data, "createdBy.missing") is None
    assert get_field(data, "subject", "default") == "default"


def test_merge_fields_merges_nested_maps():
    existing = {"subject": "Old", "meta": {"a": 1, "b": 2}}
    merged = merge_fields(existing, {"meta": {"b": 3}, "html": ""})

    assert merged == {"subject": "Old", "meta": {"a": 1, "b": 3}, "html": ""}
    # Source is left untouched
    assert existing["meta"] == {"a": 1, "b": 2}


def test_apply_update_replaces_top_level_and_dotted_fields():
    existing = {"subject": "Old", "meta": {"a": 1, "b": 2}, "tags": ["X"]}
    updated = apply_update(existing, {"meta.b": 5, "subject": "New"})

    assert updated == {"subject": "New", "meta": {"a": 1, "b": 5}, "tags": ["X"]}


def test_structurally_equal_queries_compare_equal():
    first = Query("emailTemplates").where("createdBy.id", "==", "u1")
    second = Query("/emailTemplates/").where("createdBy.id", "==", "u1")

    assert first == second
    assert first is not second
    assert first != Query("emailTemplates").where("createdBy.id", "==", "u2")


def test_unsupported_operator_is_rejected():
    with pytest.raises(DocumentStoreError):
        FieldFilter("subject", "~=", "x")


def test_query_apply_filters_orders_and_limits():
    docs = [
        StoredDocument("a", "t/a", {"rank": 3, "tags": ["X"], "createdBy": {"id": "u1"}}),
        StoredDocument("b", "t/b", {"rank": 1, "tags": ["Y"], "createdBy": {"id": "u2"}}),
        StoredDocument("c", "t/c", {"rank": 2, "tags": ["X", "Y"], "createdBy": {"id": "u1"}}),
        StoredDocument("d", "t/d", {"tags": ["X"]}),
    ]

    owned = Query("t").where("createdBy.id", "==", "u1").apply(docs)
    assert [doc.id for doc in owned] == ["a", "c"]

    tagged = Query("t").where("tags", "array-contains", "X").ordered_by("rank").apply(docs)
    assert [doc.id for doc in tagged] == ["c", "a"]

    top = Query("t").ordered_by("rank", descending=True).limited_to(2).apply(docs)
    assert [doc.id for doc in top] == ["a", "c"]

    ranks = Query("t").where("rank", "in", [1, 2]).apply(docs)
    assert [doc.id for doc in ranks] == ["b", "c"]


def test_comparison_between_mismatched_types_does_not_match():
    docs = [StoredDocument("a", "t/a", {"rank": "high"})]
    assert Query("t").where("rank", ">", 1).apply(docs) == []


def test_stored_document_to_dict_includes_id():
    doc = StoredDocument("welcome", "emailTemplates/welcome", {"subject": "Hi"})
    assert doc.to_dict() == {"subject": "Hi", "id": "welcome"}


def test_generated_document_ids_are_unique_single_segments():
    ids = {generate_document_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(len(new_id) == 20 and "/" not in new_id for new_id in ids)
