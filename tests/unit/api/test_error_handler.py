from datetime import date
from fastapi import FastAPI
from fastapi.testclient import TestClient
from app.api.exceptions import register_error_handler
from app.domain.events.models import LotStatus
from app.domain.exceptions import GraphQLRequestError, NotFound, ServiceUnavailable, Unauthorized, UpstreamError


def _client(exc: Exception) -> TestClient:
    app = FastAPI()
    register_error_handler(app)

    @app.get("/boom")
    async def boom():
        raise exc

    return TestClient(app)


def test_not_found_renders_problem_json_with_context():
    res = _client(NotFound("Evento não encontrado", ctx={"event_id": "e1"})).get("/boom")

    assert res.status_code == 404
    assert res.headers["content-type"].startswith("application/problem+json")
    body = res.json()
    assert body["title"] == "Not Found"
    assert body["detail"] == "Evento não encontrado"
    assert body["instance"] == "/boom"
    assert body["context"] == {"event_id": "e1"}


def test_unauthorized_sets_bearer_challenge():
    res = _client(Unauthorized("Session expired")).get("/boom")

    assert res.status_code == 401
    assert res.headers["www-authenticate"].startswith("Bearer ")
    assert 'error_description="Session expired"' in res.headers["www-authenticate"]


def test_upstream_error_maps_to_bad_gateway_with_status_in_context():
    res = _client(UpstreamError("Erro na requisição", status_code=500)).get("/boom")

    assert res.status_code == 502
    assert res.json()["context"] == {"upstream_status": 500}


def test_graphql_error_exposes_codes():
    res = _client(GraphQLRequestError(["Forbidden"], codes=["FORBIDDEN"])).get("/boom")

    assert res.status_code == 502
    assert res.json()["codes"] == ["FORBIDDEN"]
    assert res.json()["detail"] == "Forbidden"


def test_service_unavailable_sets_retry_after():
    res = _client(ServiceUnavailable("Redis down")).get("/boom")

    assert res.status_code == 503
    assert res.headers["retry-after"] == "5"


def test_context_values_are_normalized():
    exc = NotFound("x", ctx={"status": LotStatus.ACTIVE, "day": date(2026, 1, 2), "ids": ("a", "b")})

    assert exc.ctx == {"status": LotStatus.ACTIVE.value, "day": "2026-01-02", "ids": ["a", "b"]}
