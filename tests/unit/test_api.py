"""Tests for the HTTP routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from infixcalc.api import create_app
from infixcalc.config import Settings
from infixcalc.core import EvaluationFault


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


class TestEvaluate:
    def test_success(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json={"expression": "2+3*4"})
        assert response.status_code == 200
        assert response.json() == {
            "result": 14.0,
            "error": {"target_type": "None", "target": ""},
        }

    def test_variables(self, client: TestClient) -> None:
        response = client.post(
            "/api/evaluate",
            json={"expression": "x^2", "variables": [{"name": "x", "value": 3}]},
        )
        assert response.json()["result"] == 9.0

    def test_parse_error_is_200(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json={"expression": "foo(1)"})
        assert response.status_code == 200
        assert response.json() == {
            "result": None,
            "error": {"target_type": "Function", "target": "foo"},
        }

    def test_empty_expression_rejected(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json={"expression": ""})
        assert response.status_code == 422

    def test_missing_expression_rejected(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json={"variables": []})
        assert response.status_code == 422

    def test_nan_result_is_null(self, client: TestClient) -> None:
        response = client.post("/api/evaluate", json={"expression": "0/0"})
        assert response.status_code == 200
        assert response.json()["result"] is None
        assert response.json()["error"]["target_type"] == "None"

    def test_configured_variables(self) -> None:
        client = TestClient(create_app(Settings(variables={"g": 10.0})))
        response = client.post("/api/evaluate", json={"expression": "g/2"})
        assert response.json()["result"] == 5.0

    def test_evaluation_fault_is_500(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken(program: object) -> float:
            raise EvaluationFault("operand stack exhausted")

        monkeypatch.setattr("infixcalc.service.evaluate", broken)
        response = client.post("/api/evaluate", json={"expression": "1+1"})
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal evaluation fault"}


class TestListings:
    def test_variables(self, client: TestClient) -> None:
        response = client.get("/api/variables")
        assert response.status_code == 200
        assert {item["name"] for item in response.json()} == {"PI", "E"}

    def test_functions(self, client: TestClient) -> None:
        data = {item["name"]: item for item in client.get("/api/functions").json()}
        assert data["max"] == {"name": "max", "usage": "max(x,y)", "arity": 2}
        assert "sqrt" in data

    def test_operators(self, client: TestClient) -> None:
        data = {item["symbol"]: item for item in client.get("/api/operators").json()}
        assert data["*"]["usage"] == "val1 * val2"
        assert data["-"]["precedence"] == "add"


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "infixcalc"}
