import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from exceptionserver.config import settings
from exceptionserver.logging import get_logger
from exceptionserver.middleware import RequestIDMiddleware
from exceptionserver.routers.scenarios import build_router
from exceptionserver.services.scenarios import ScenarioTable, build_scenario_table

logger = get_logger(__name__)

PANIC_PREFIX = "PANIC: "


async def recover_from_panic(request: Request, exc: Exception) -> PlainTextResponse:
    """Turn an exception that escaped every route into a plain-text 500.

    - Logs the exception with traceback (includes request_id from context)
    - Body is ``PANIC: <message>``, plus the traceback if RECOVERY_PRINT_STACK is set

    Starlette re-raises the exception after this response is sent, so the
    server still sees it; other in-flight requests are unaffected.
    """
    logger.exception("panic_recovered", path=request.url.path, method=request.method)
    body = f"{PANIC_PREFIX}{exc}"
    if settings.recovery_print_stack:
        body += "\n" + "".join(traceback.format_exception(exc))
    return PlainTextResponse(body, status_code=500)


def create_app(table: ScenarioTable) -> FastAPI:
    """Build the application serving exactly the scenarios in ``table``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("server_started", scenarios=sorted(table))
        yield

    app = FastAPI(lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(Exception, recover_from_panic)
    app.include_router(build_router(table))
    return app


app = create_app(build_scenario_table())
