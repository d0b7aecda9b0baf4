# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-31
# Description: test_entity_indexer.py
# -----------------------------------------------------------------------------
import pytest

from errors.SearchErrors import InvalidArgument, NotFound, PermissionDenied
from indexing.TextExtraction import extract_searchable_text, register_fields, SEARCHABLE_FIELDS


def test_index_entity_writes_embedding_fields(indexer, embedder, store):
    embedder.vectors["Camera rig"] = [1.0, 0.0]
    store.set("projects", "p1", {"organizationId": "org-1", "name": "Camera rig"})

    assert indexer.index_entity("projects", "p1", "Camera rig", {"embeddingVersion": "1.0"}) is True

    data = store.get("projects", "p1").data
    assert data["embedding"] == [1.0, 0.0]
    assert data["embeddingText"] == "Camera rig"
    assert data["embeddingUpdatedAt"] == "2026-02-01T00:00:00+00:00"
    assert data["embeddingModel"] == "fake-embedding"
    assert data["embeddingVersion"] == "1.0"
    assert data["name"] == "Camera rig"


def test_reindex_overwrites_previous_embedding(indexer, embedder, store):
    embedder.vectors["old"] = [1.0, 0.0]
    embedder.vectors["new"] = [0.0, 1.0]
    store.set("projects", "p1", {"organizationId": "org-1"})

    indexer.index_entity("projects", "p1", "old")
    indexer.index_entity("projects", "p1", "new")
    indexer.index_entity("projects", "p1", "new")

    data = store.get("projects", "p1").data
    assert data["embedding"] == [0.0, 1.0]
    assert data["embeddingText"] == "new"


def test_metadata_cannot_override_reserved_fields(indexer, store):
    store.set("projects", "p1", {"organizationId": "org-1"})
    indexer.index_entity("projects", "p1", "hello", {"embedding": [9.9], "embeddingText": "spoofed"})
    data = store.get("projects", "p1").data
    assert data["embeddingText"] == "hello"
    assert data["embedding"] == [0.0, 0.0, 1.0]


def test_empty_text_is_a_noop(indexer, embedder, store):
    store.set("projects", "p1", {"organizationId": "org-1"})
    assert indexer.index_entity("projects", "p1", "   ") is False
    assert "embedding" not in store.get("projects", "p1").data
    assert embedder.calls == []


def test_missing_record_or_keys(indexer):
    with pytest.raises(NotFound):
        indexer.index_entity("projects", "missing", "text")
    with pytest.raises(InvalidArgument):
        indexer.index_entity("", "p1", "text")


def test_service_index_entity_is_tenant_checked(indexing_service, store, tenant, other_tenant):
    store.set("projects", "p1", {"organizationId": "org-1"})

    assert indexing_service.index_entity(tenant, "projects", "p1", "hello", {"organizationId": "org-evil"}) is True
    assert store.get("projects", "p1").data["organizationId"] == "org-1"

    with pytest.raises(PermissionDenied):
        indexing_service.index_entity(other_tenant, "projects", "p1", "hello")
    with pytest.raises(NotFound):
        indexing_service.index_entity(tenant, "projects", "missing", "hello")


def test_extract_searchable_text_uses_collection_fields():
    data = {
        "name": "Pilot",
        "description": "Night shoot",
        "tags": ["drama", "exterior"],
        "metadata": {"extendedStatus": "wrapped"},
        "budget": 1000,
    }
    text = extract_searchable_text("projects", data)
    assert text == "Pilot Night shoot wrapped drama exterior"


def test_extract_searchable_text_defaults_and_registration(monkeypatch):
    monkeypatch.setitem(SEARCHABLE_FIELDS, "customThings", ["title"])
    assert extract_searchable_text("customThings", {"title": "Hello", "name": "ignored"}) == "Hello"
    assert extract_searchable_text("unknownCollection", {"name": "A", "notes": "B"}) == "A B"

    register_fields("customThings", ["name"])
    assert extract_searchable_text("customThings", {"title": "Hello", "name": "N"}) == "N"
    with pytest.raises(ValueError):
        register_fields("customThings", [])
