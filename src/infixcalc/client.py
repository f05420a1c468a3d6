"""
HTTP client for a remote infixcalc service.

Usage:
    with ParserClient("http://localhost:8000") as client:
        response = client.evaluate_expression("2 * x", {"x": 21})
        response.result  # 42.0
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType

import httpx

from infixcalc.service import (
    EvaluateRequest,
    EvaluateResponse,
    FunctionInfo,
    OperatorInfo,
    VariableInfo,
)

logger = logging.getLogger(__name__)


class ParserClient:
    """Thin wrapper over the service's JSON API.

    Args:
        base_url: Service root, e.g. ``http://localhost:8000``.
        http: Pre-configured client to use instead; it is not closed by
            ``close()``.
        timeout: Request timeout in seconds for an owned client.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        *,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> ParserClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def evaluate_expression(
        self,
        expression: str,
        variables: Mapping[str, float] | None = None,
    ) -> EvaluateResponse:
        """Evaluate remotely; compile errors come back in ``response.error``.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
        """
        request = EvaluateRequest(
            expression=expression,
            variables=[
                VariableInfo(name=name, value=value) for name, value in (variables or {}).items()
            ],
        )
        resp = self._http.post("/api/evaluate", json=request.model_dump(mode="json"))
        resp.raise_for_status()
        return EvaluateResponse.model_validate(resp.json())

    def available_variables(self) -> list[VariableInfo]:
        return [VariableInfo.model_validate(item) for item in self._get("/api/variables")]

    def available_functions(self) -> list[FunctionInfo]:
        return [FunctionInfo.model_validate(item) for item in self._get("/api/functions")]

    def available_operators(self) -> list[OperatorInfo]:
        return [OperatorInfo.model_validate(item) for item in self._get("/api/operators")]

    def _get(self, path: str) -> list[dict[str, object]]:
        resp = self._http.get(path)
        resp.raise_for_status()
        data = resp.json()
        logger.debug("GET %s returned %d entries", path, len(data))
        return data
