"""
Tests unitaires du client REST du store (PostgREST), avec un transport httpx simulé.
"""

import json

import httpx
import pytest

from app.store import RestSubmissionStore, StoreError

BASE_URL = "https://test-project.supabase.co"
KEY = "service-key"


def make_store(handler) -> RestSubmissionStore:
    return RestSubmissionStore(BASE_URL, KEY, transport=httpx.MockTransport(handler))


def test_fetch_all_requete_et_authentification():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[{"id": "s1", "fullName": "Jane"}])

    rows = make_store(handler).fetch_all()

    assert rows == [{"id": "s1", "fullName": "Jane"}]
    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/student_submissions"
    assert request.url.params["select"] == "*"
    assert request.headers["apikey"] == KEY
    assert request.headers["authorization"] == f"Bearer {KEY}"


def test_fetch_all_liste_vide():
    store = make_store(lambda request: httpx.Response(200, json=[]))
    assert store.fetch_all() == []


def test_insert_une_ligne():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201)

    make_store(handler).insert({"id": "s1", "fullName": "Jane"})

    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/rest/v1/student_submissions"
    assert request.headers["prefer"] == "return=minimal"
    assert json.loads(request.content) == [{"id": "s1", "fullName": "Jane"}]


def test_url_avec_slash_final():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[])

    RestSubmissionStore(BASE_URL + "/", KEY, transport=httpx.MockTransport(handler)).fetch_all()

    assert requests[0].url.path == "/rest/v1/student_submissions"


def test_erreur_postgrest_message_json():
    """Le message d'erreur du store est repris tel quel."""
    store = make_store(lambda request: httpx.Response(
        409,
        json={"code": "23505", "message": 'duplicate key value violates unique constraint "student_submissions_pkey"'},
    ))

    with pytest.raises(StoreError) as exc_info:
        store.insert({"id": "s1", "fullName": "Jane"})

    assert exc_info.value.message == 'duplicate key value violates unique constraint "student_submissions_pkey"'


def test_erreur_corps_texte():
    store = make_store(lambda request: httpx.Response(503, text="Service Unavailable"))

    with pytest.raises(StoreError, match="Service Unavailable"):
        store.fetch_all()


def test_erreur_sans_corps():
    store = make_store(lambda request: httpx.Response(500))

    with pytest.raises(StoreError, match="HTTP 500"):
        store.fetch_all()


def test_store_injoignable():
    """Erreur réseau → StoreError (pas d'exception httpx qui remonte)."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = make_store(handler)

    with pytest.raises(StoreError, match="connection refused"):
        store.fetch_all()
    with pytest.raises(StoreError, match="connection refused"):
        store.insert({"id": "s1", "fullName": "Jane"})


def test_api_store_injoignable():
    """Store injoignable → GET et POST répondent 500 avec le préfixe attendu."""
    from fastapi.testclient import TestClient

    from app.main import app
    from app.store import get_store_provider

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = make_store(handler)
    app.dependency_overrides[get_store_provider] = lambda: lambda: store
    with TestClient(app) as client:
        get_response = client.get("/api/students")
        post_response = client.post("/api/students", json={"id": "s1", "fullName": "Jane Doe"})
    app.dependency_overrides.clear()

    assert get_response.status_code == 500
    assert get_response.json()["message"].startswith("Failed to retrieve data:")
    assert post_response.status_code == 500
    assert post_response.json()["message"].startswith("Failed to save data:")
