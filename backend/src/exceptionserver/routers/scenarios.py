"""Scenario endpoints.

One route per entry of the scenario table. Error chains are returned as a
JSON string holding the rendered chain, never as a JSON object. Failed
writes to the client are handled by RequestIDMiddleware, which owns the
connection's ``send``.
"""

from collections.abc import Awaitable, Callable

from fastapi import APIRouter
from starlette.responses import JSONResponse, PlainTextResponse, Response

from exceptionserver.logging import get_logger
from exceptionserver.services.scenarios import Outcome, Scenario, ScenarioTable

logger = get_logger(__name__)

SCENARIO_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def write_json(outcome: Outcome, status_code: int) -> Response:
    """Encode ``outcome.payload`` as JSON with the scenario's status.

    If encoding fails, answer 500 with the encoder's message as plain text.
    """
    try:
        return JSONResponse(content=outcome.payload, status_code=status_code)
    except (TypeError, ValueError) as exc:
        logger.error("response_encoding_failed", error=str(exc))
        return PlainTextResponse(str(exc), status_code=500)


def _endpoint(scenario: Scenario) -> Callable[[], Awaitable[Response]]:
    async def endpoint() -> Response:
        # PanicError from resolve() is left to the recovery handler
        outcome = scenario.resolve()
        log_fields = outcome.log_fields()
        if log_fields:
            logger.info(
                "scenario_error",
                path=scenario.path,
                status_code=scenario.status_code,
                **log_fields,
            )
        return write_json(outcome, scenario.status_code)

    return endpoint


def build_router(table: ScenarioTable) -> APIRouter:
    """Register every scenario in ``table`` on a new router."""
    router = APIRouter()
    for scenario in table.values():
        router.add_api_route(
            scenario.path,
            _endpoint(scenario),
            methods=SCENARIO_METHODS,
            include_in_schema=False,
        )
    return router
