"""
Smart Palette API application.
"""
from dotenv import load_dotenv

# Load environment variables before config is read
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smart_palette import __version__
from smart_palette.api.v1 import router as v1_router
from smart_palette.config import config
from smart_palette.schemas import HealthResponse
from smart_palette.utils.logging import configure_logging


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Smart Palette",
        description="Color extraction, harmony generation and palette export",
        version=__version__
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"]
    )

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        """Service health check."""
        return HealthResponse(ok=True, version=__version__)

    app.include_router(v1_router)
    return app


app = create_app()
