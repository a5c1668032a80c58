"""FastAPI application."""

import argparse
import logging
from typing import Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse the command line, ignoring options meant for other tools."""
    parser = argparse.ArgumentParser(allow_abbrev=False)
    parser.add_argument("--docker", action="store_true", help="Running with docker")
    parser.add_argument("--host", default="127.0.0.1", help="Application host.")
    parser.add_argument("--port", default="3001", help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args, _ = parser.parse_known_args(argv)
    return args


def load_environment(args: argparse.Namespace) -> None:
    """Load the local .env file unless running inside docker."""
    if not args.docker:
        load_dotenv("../../.env")


args = parse_args()
# Settings are read when configs is first imported, so the .env file must be
# loaded before the application modules below.
load_environment(args)

from configs import settings  # noqa: E402
from src.controllers.price_controllers import price_router  # noqa: E402


def create_app() -> FastAPI:
    """Build the API with CORS and the price routes."""
    logger.info("Starting FastAPI application...")
    application = FastAPI(
        title="Grocee API",
        root_path=settings.ROOT_PATH_BACKEND,
        description="Live grocery price comparison across Canadian stores",
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_credentials=True,
    )
    application.include_router(price_router)

    @application.get("/", response_description="Api healthcheck")  # type: ignore[misc]
    async def index() -> Dict[str, str]:
        """Define a route for handling HTTP GET requests to the root URL ("/")."""
        return {"status": "ok"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host=args.host, port=int(args.port), reload=args.reload)
