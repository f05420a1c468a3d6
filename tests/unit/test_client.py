"""Tests for the HTTP client, run against the in-process app."""

from __future__ import annotations

import math

import httpx
import pytest
from fastapi.testclient import TestClient

from infixcalc.api import create_app
from infixcalc.client import ParserClient
from infixcalc.core import TargetType


@pytest.fixture
def client() -> ParserClient:
    return ParserClient(http=TestClient(create_app()))


class TestParserClient:
    def test_evaluate(self, client: ParserClient) -> None:
        response = client.evaluate_expression("2 * x", {"x": 21})
        assert response.ok
        assert response.result == 42.0

    def test_parse_error(self, client: ParserClient) -> None:
        response = client.evaluate_expression("sqrt")
        assert not response.ok
        assert response.error.target_type is TargetType.FUNCTION_VARIABLE
        assert response.error.target == "sqrt"

    def test_non_finite_comes_back_as_none(self, client: ParserClient) -> None:
        response = client.evaluate_expression("1/0")
        assert response.ok
        assert response.result is None

    def test_listings(self, client: ParserClient) -> None:
        variables = {info.name: info.value for info in client.available_variables()}
        assert variables["E"] == pytest.approx(math.e)
        assert "log" in {info.name for info in client.available_functions()}
        assert "^" in {info.symbol for info in client.available_operators()}

    def test_http_error_raises(self, client: ParserClient, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(program: object) -> float:
            from infixcalc.core import EvaluationFault

            raise EvaluationFault("boom")

        monkeypatch.setattr("infixcalc.service.evaluate", broken)
        with pytest.raises(httpx.HTTPStatusError):
            client.evaluate_expression("1+1")

    def test_close_leaves_supplied_client_open(self) -> None:
        http = TestClient(create_app())
        with ParserClient(http=http) as client:
            client.available_operators()
        assert not http.is_closed
        http.close()
