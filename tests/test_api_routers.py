# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-03
# Description: test_api_routers.py
# -----------------------------------------------------------------------------
import pytest
from starlette.testclient import TestClient

from api import dependencies
from api.main import app
from services.HealthService import HealthService
from services.IndexValidationService import IndexValidationService

AUTH = {"Authorization": "Bearer token-org-1"}
OTHER_AUTH = {"Authorization": "Bearer token-org-2"}


@pytest.fixture
def client(guard, search_service, indexing_service, store, embedder):
    app.dependency_overrides[dependencies.get_tenant_guard] = lambda: guard
    app.dependency_overrides[dependencies.get_search_service] = lambda: search_service
    app.dependency_overrides[dependencies.get_indexing_service] = lambda: indexing_service
    app.dependency_overrides[dependencies.get_validation_service] = lambda: IndexValidationService(
        store=store, expected_dimensions=2
    )
    app.dependency_overrides[dependencies.get_health_service] = lambda: HealthService(embedder=embedder, store=store)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(store, embedder):
    embedder.vectors["camera"] = [1.0, 0.0]
    embedder.vectors["Camera rig"] = [1.0, 0.0]
    embedder.vectors["Audio mixing"] = [0.0, 1.0]
    store.set("projects", "p1", {"organizationId": "org-1", "name": "Camera rig"})
    store.set("projects", "p2", {"organizationId": "org-1", "name": "Audio mixing"})
    store.set("projects", "p3", {"organizationId": "org-2", "name": "Camera crane"})
    return store


def test_health(client):
    r = client.get("/health/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.get("/health/deep")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "ok"
    assert body["summary"] == {"total": 2, "passed": 2, "failed": 0}


def test_requests_without_token_are_rejected(client):
    r = client.post("/search", json={"query": "camera", "collection": "projects"})
    assert r.status_code == 401
    assert r.json()["code"] == "unauthenticated"


def test_index_batch_then_search(client, seeded):
    r = client.post("/indexing/batch", json={"collection": "projects"}, headers=AUTH)
    assert r.status_code == 200, r.text
    job = r.json()
    assert job["status"] == "completed"
    assert job["indexedDocuments"] == 2
    assert job["organizationId"] == "org-1"

    r = client.post("/search", json={"query": "camera", "collection": "projects", "limit": 5}, headers=AUTH)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["count"] == 2
    assert body["results"][0]["id"] == "p1"
    assert "embedding" not in body["results"][0]["data"]

    r = client.get("/indexing/status", params={"collection": "projects"}, headers=AUTH)
    assert r.json()["job"]["jobId"] == job["jobId"]

    r = client.get("/indexing/status", params={"collection": "projects"}, headers=OTHER_AUTH)
    assert r.json()["job"] is None

    r = client.get("/indexing/validate", params={"collection": "projects"}, headers=AUTH)
    assert r.status_code == 200, r.text
    assert r.json()["indexedDocuments"] == 2
    assert r.json()["valid"] is True


def test_search_all_and_similar(client, seeded):
    client.post("/indexing/batch", json={"collection": "projects"}, headers=AUTH)

    r = client.post("/search/all", json={"query": "camera", "collections": ["projects"]}, headers=AUTH)
    assert r.status_code == 200, r.text
    assert [h["id"] for h in r.json()["results"]] == ["p1", "p2"]

    r = client.post("/search/similar", json={"collection": "projects", "docId": "p1"}, headers=AUTH)
    assert r.status_code == 200, r.text
    assert [h["id"] for h in r.json()["results"]] == ["p2"]

    r = client.post("/search/similar", json={"collection": "projects", "docId": "p1"}, headers=OTHER_AUTH)
    assert r.status_code == 403
    assert r.json()["code"] == "permission-denied"


def test_index_entity_endpoint(client, seeded):
    r = client.post(
        "/indexing/entity",
        json={"collection": "projects", "docId": "p2", "text": "Audio mixing"},
        headers=AUTH,
    )
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "indexed": True}

    r = client.post("/indexing/entity", json={"collection": "projects", "docId": "p2", "text": ""}, headers=AUTH)
    assert r.json() == {"success": True, "indexed": False}

    r = client.post("/indexing/entity", json={"collection": "projects", "docId": "nope", "text": "x"}, headers=AUTH)
    assert r.status_code == 404

    r = client.post("/indexing/entity", json={"collection": "projects", "docId": "p3", "text": "x"}, headers=AUTH)
    assert r.status_code == 403


def test_resume_and_pause_errors(client, seeded):
    job = client.post("/indexing/batch", json={"collection": "projects"}, headers=AUTH).json()

    r = client.post("/indexing/resume", json={"jobId": job["jobId"]}, headers=AUTH)
    assert r.status_code == 409
    assert r.json()["code"] == "failed-precondition"

    r = client.post("/indexing/pause", json={"jobId": job["jobId"]}, headers=OTHER_AUTH)
    assert r.status_code == 403

    r = client.post("/indexing/resume", json={"jobId": "missing"}, headers=AUTH)
    assert r.status_code == 404


def test_invalid_bodies_are_400(client):
    r = client.post("/search", json={"query": "", "collection": "projects"}, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid-argument"

    r = client.post("/search", json={"query": "   ", "collection": "projects"}, headers=AUTH)
    assert r.status_code == 400

    r = client.post("/indexing/batch", json={"collection": "projects", "batchSize": 0}, headers=AUTH)
    assert r.status_code == 400
