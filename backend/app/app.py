"""FastAPI application."""

import argparse
import logging
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from price_compare.configs import settings
from price_compare.controllers.price_controllers import price_router
from price_compare.logger_config import configure_logging


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
configure_logging(settings.LOG_LEVEL)


def create_app() -> FastAPI:
    """Build the API with CORS and the price comparison routes."""
    app = FastAPI(
        title="Price Compare API",
        root_path=settings.ROOT_PATH_BACKEND,
        description="Find where a product is cheapest right now.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.include_router(price_router)

    @app.get("/", response_description="Api healthcheck")  # type: ignore[misc]
    async def index() -> Dict[str, str]:
        """Define a route for handling HTTP GET requests to the root URL ("/")."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="0.0.0.0", help="Application host.")
    parser.add_argument("--port", default=None, help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args()
    port = int(args.port or settings.PORT)
    logger.info("Starting FastAPI application on port %d...", port)
    uvicorn.run("app:app", host=args.host, port=port, reload=args.reload)
