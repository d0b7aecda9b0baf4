# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-28
# Description: test_document_store.py
# -----------------------------------------------------------------------------
import pytest

from errors.SearchErrors import InvalidArgument, NotFound
from store.ChromaDocumentStore import ChromaDocumentStore
from store.filters import Eq, In, NotNull, Range, get_path, matches_all


def test_get_path_reaches_nested_values():
    data = {"metadata": {"extendedStatus": "wrapped"}, "name": "Pilot"}
    assert get_path(data, "metadata.extendedStatus") == "wrapped"
    assert get_path(data, "metadata.missing", "n/a") == "n/a"
    assert get_path(data, "name.first", None) is None


def test_filter_primitives_match():
    data = {"organizationId": "org-1", "budget": 120, "status": "active", "embedding": [0.1]}
    assert Eq("organizationId", "org-1").matches(data)
    assert not Eq("organizationId", "org-2").matches(data)
    assert Range("budget", gte=100, lt=200).matches(data)
    assert not Range("budget", gt=120).matches(data)
    assert In("status", ["active", "archived"]).matches(data)
    assert NotNull("embedding").matches(data)
    assert not NotNull("missing").matches(data)
    assert matches_all(data, [Eq("organizationId", "org-1"), NotNull("embedding")])


def test_filter_where_translation():
    assert Eq("organizationId", "org-1").to_where() == {"organizationId": {"$eq": "org-1"}}
    assert In("status", ("a", "b")).to_where() == {"status": {"$in": ["a", "b"]}}
    assert Range("budget", gte=1, lte=5).to_where() == {"$and": [{"budget": {"$gte": 1}}, {"budget": {"$lte": 5}}]}
    assert Range("name", gte="a").to_where() is None
    assert NotNull("embedding").to_where() is None


def test_filters_reject_bad_arguments():
    with pytest.raises(ValueError):
        Eq("", "x")
    with pytest.raises(ValueError):
        Range("budget")
    with pytest.raises(TypeError):
        Eq("tags", ["a"])


def test_memory_store_query_is_filtered_and_ordered(store):
    store.set("projects", "p2", {"organizationId": "org-1", "name": "B"})
    store.set("projects", "p1", {"organizationId": "org-1", "name": "A"})
    store.set("projects", "p3", {"organizationId": "org-2", "name": "C"})

    docs = store.query("projects", [Eq("organizationId", "org-1")])
    assert [d.id for d in docs] == ["p1", "p2"]


def test_memory_store_update_merges_and_requires_existing(store):
    store.set("projects", "p1", {"organizationId": "org-1", "name": "A"})
    store.update("projects", "p1", {"embedding": [1.0, 0.0]})
    assert store.get("projects", "p1").data == {"organizationId": "org-1", "name": "A", "embedding": [1.0, 0.0]}

    with pytest.raises(NotFound):
        store.update("projects", "missing", {"name": "x"})


def test_memory_store_returns_copies(store):
    store.set("projects", "p1", {"tags": ["a"]})
    doc = store.get("projects", "p1")
    doc.data["tags"].append("b")
    assert store.get("projects", "p1").data["tags"] == ["a"]


def test_memory_store_delete_and_key_checks(store):
    store.set("projects", "p1", {"name": "A"})
    assert store.delete("projects", "p1") is True
    assert store.delete("projects", "p1") is False
    assert store.get("projects", "p1") is None
    with pytest.raises(InvalidArgument):
        store.get("", "p1")


def test_chroma_where_clause_pushes_down_tenant_and_embedding_flag():
    where = ChromaDocumentStore._build_where([Eq("organizationId", "org-1"), NotNull("embedding")])
    assert where == {"$and": [{"organizationId": {"$eq": "org-1"}}, {"has_embedding": {"$eq": True}}]}


def test_chroma_where_clause_skips_nested_fields():
    assert ChromaDocumentStore._build_where([Eq("metadata.status", "x")]) is None
    assert ChromaDocumentStore._build_where([Eq("organizationId", "org-1")]) == {"organizationId": {"$eq": "org-1"}}


@pytest.fixture
def chroma_store():
    import uuid

    import chromadb

    from config.Config import Config

    cfg = Config(openai_api_key="test", store_backend="chroma", embedding_dimensions=2)
    store = ChromaDocumentStore(cfg=cfg, client=chromadb.EphemeralClient())
    return store, f"projects_{uuid.uuid4().hex[:8]}"


def test_chroma_store_round_trip_with_placeholder_vectors(chroma_store):
    store, coll = chroma_store
    store.set(coll, "p1", {"organizationId": "org-1", "name": "Unindexed"})
    store.set(coll, "p2", {"organizationId": "org-1", "name": "Indexed", "embedding": [1.0, 0.0]})
    store.set(coll, "p3", {"organizationId": "org-2", "name": "Other", "embedding": [0.0, 1.0]})

    assert "embedding" not in store.get(coll, "p1").data
    assert store.get(coll, "p2").data["embedding"] == pytest.approx([1.0, 0.0])

    docs = store.query(coll, [Eq("organizationId", "org-1"), NotNull("embedding")])
    assert [d.id for d in docs] == ["p2"]

    store.update(coll, "p1", {"embedding": [0.5, 0.5], "embeddingText": "Unindexed"})
    docs = store.query(coll, [Eq("organizationId", "org-1"), NotNull("embedding")])
    assert [d.id for d in docs] == ["p1", "p2"]
    assert docs[0].data["name"] == "Unindexed"

    with pytest.raises(NotFound):
        store.update(coll, "missing", {"name": "x"})
    assert store.delete(coll, "p3") is True
    assert store.get(coll, "p3") is None


def test_chroma_placeholders_match_gemini_vector_size():
    import uuid

    import chromadb

    from config.Config import Config

    cfg = Config(embedding_provider="gemini", gemini_api_key="k", store_backend="chroma")
    store = ChromaDocumentStore(cfg=cfg, client=chromadb.EphemeralClient())
    coll = f"projects_{uuid.uuid4().hex[:8]}"

    store.set(coll, "p1", {"organizationId": "org-1", "name": "Waiting for an embedding"})
    store.update(coll, "p1", {"embedding": [0.5] * 768, "embeddingText": "Waiting for an embedding"})

    assert store.dimensions == 768
    assert len(store.get(coll, "p1").data["embedding"]) == 768
