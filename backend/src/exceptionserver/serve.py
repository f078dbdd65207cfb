"""Console entry point: ``exceptionserver`` runs the app under uvicorn."""

import uvicorn

from exceptionserver.config import settings


def main() -> None:
    # log_config=None keeps the structlog setup from exceptionserver.logging
    uvicorn.run(
        "exceptionserver.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
