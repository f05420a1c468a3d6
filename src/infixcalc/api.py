"""HTTP routes exposing the parser service.

Endpoints:
    POST /api/evaluate   - evaluate an expression with optional variables
    GET  /api/variables  - built-in constants and configured variables
    GET  /api/functions  - available functions with usage strings
    GET  /api/operators  - available operators with usage strings
    GET  /health         - liveness probe
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from infixcalc._version import get_version
from infixcalc.config import Settings, load_settings
from infixcalc.core.errors import EvaluationFault
from infixcalc.service import (
    EvaluateRequest,
    EvaluateResponse,
    FunctionInfo,
    OperatorInfo,
    ParserService,
    VariableInfo,
)

logger = logging.getLogger(__name__)


def create_parser_router(service: ParserService) -> APIRouter:
    """Create the parser routes bound to ``service``."""
    router = APIRouter(prefix="/api", tags=["Parser"])

    @router.post("/evaluate", response_model=EvaluateResponse)
    async def evaluate_expression(request: EvaluateRequest) -> EvaluateResponse:
        """Evaluate an expression; compile errors are reported in the body."""
        response = service.evaluate_expression(request.expression, request.variables)
        if not response.ok:
            logger.info(f"Rejected expression {request.expression!r}: {response.error.describe()}")
        return response

    @router.get("/variables", response_model=list[VariableInfo])
    async def list_variables() -> list[VariableInfo]:
        return service.available_variables()

    @router.get("/functions", response_model=list[FunctionInfo])
    async def list_functions() -> list[FunctionInfo]:
        return service.available_functions()

    @router.get("/operators", response_model=list[OperatorInfo])
    async def list_operators() -> list[OperatorInfo]:
        return service.available_operators()

    return router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or Settings()
    app = FastAPI(
        title="infixcalc",
        description="Infix expression evaluation service",
        version=get_version(),
    )
    app.include_router(create_parser_router(ParserService(settings)))

    @app.exception_handler(EvaluationFault)
    async def evaluation_fault_handler(request: Request, exc: EvaluationFault) -> JSONResponse:
        logger.error(f"Internal evaluation fault on {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal evaluation fault"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "infixcalc"}

    return app


def create_app_factory() -> FastAPI:
    """ASGI factory for production deployment."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return create_app(settings)
