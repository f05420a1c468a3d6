"""Tests for the ParserService facade."""

from __future__ import annotations

import math

import pytest

from infixcalc.config import EngineConfig, Settings
from infixcalc.core import ParseError, TargetType
from infixcalc.service import EvaluateResponse, ParserService, VariableInfo


@pytest.fixture
def service() -> ParserService:
    return ParserService()


class TestEvaluateExpression:
    def test_ok(self, service: ParserService) -> None:
        response = service.evaluate_expression("2+3*4")
        assert response.ok
        assert response.result == 14.0
        assert response.error == ParseError.none()

    def test_caller_variables(self, service: ParserService) -> None:
        response = service.evaluate_expression(
            "x*y", [VariableInfo(name="x", value=6), VariableInfo(name="y", value=7)]
        )
        assert response.result == 42.0

    def test_caller_variables_override_constants(self, service: ParserService) -> None:
        response = service.evaluate_expression("PI", [VariableInfo(name="PI", value=3)])
        assert response.result == 3.0

    def test_parse_error_is_reported(self, service: ParserService) -> None:
        response = service.evaluate_expression("2+foo")
        assert not response.ok
        assert response.result is None
        assert response.error.target_type is TargetType.VARIABLE
        assert response.error.target == "foo"

    def test_empty_expression(self, service: ParserService) -> None:
        with pytest.raises(ValueError, match="not defined"):
            service.evaluate_expression("")

    def test_invalid_variable_name(self, service: ParserService) -> None:
        response = service.evaluate_expression(
            "1", [VariableInfo(name="x", value=1), VariableInfo(name="a b", value=1)]
        )
        assert response.error == ParseError.other("a b")
        assert response.error.describe() == "Malformed expression near 'a b'"

    def test_non_finite_result(self, service: ParserService) -> None:
        response = service.evaluate_expression("1/0")
        assert response.ok
        assert response.result == math.inf

    def test_calls_do_not_share_variables(self, service: ParserService) -> None:
        service.evaluate_expression("x", [VariableInfo(name="x", value=1)])
        response = service.evaluate_expression("x")
        assert response.error.target_type is TargetType.VARIABLE


class TestSettings:
    def test_configured_variables(self) -> None:
        service = ParserService(Settings(variables={"g": 9.5}))
        assert service.evaluate_expression("2*g").result == 19.0

    def test_request_variables_win(self) -> None:
        service = ParserService(Settings(variables={"g": 9.5}))
        response = service.evaluate_expression("g", [VariableInfo(name="g", value=1)])
        assert response.result == 1.0

    def test_max_depth(self) -> None:
        service = ParserService(Settings(engine=EngineConfig(max_depth=3)))
        assert service.evaluate_expression("1+2").ok
        assert service.evaluate_expression("1+2+3+4").error == ParseError.other()


class TestListings:
    def test_variables(self) -> None:
        service = ParserService(Settings(variables={"g": 9.5}))
        names = {info.name: info.value for info in service.available_variables()}
        assert names["PI"] == pytest.approx(math.pi)
        assert names["g"] == 9.5

    def test_functions(self, service: ParserService) -> None:
        functions = {info.name: info for info in service.available_functions()}
        assert functions["log"].usage == "log(x, base)"
        assert functions["log"].arity == 2
        assert functions["sin"].arity == 1

    def test_operators(self, service: ParserService) -> None:
        operators = {info.symbol: info for info in service.available_operators()}
        assert set(operators) == {"+", "-", "*", "/", "^"}
        assert operators["+"].usage == "val1 + val2"
        assert operators["^"].precedence == "exponential"


class TestEvaluateResponse:
    def test_non_finite_serializes_as_null(self) -> None:
        data = EvaluateResponse(result=math.nan).model_dump(mode="json")
        assert data["result"] is None
        assert data["error"] == {"target_type": "None", "target": ""}

    def test_finite_value_kept(self) -> None:
        assert EvaluateResponse(result=1.5).model_dump(mode="json")["result"] == 1.5
