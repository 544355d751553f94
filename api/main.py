"""
Vyapar Pro Spreadsheet Endpoint - Main Application.

FastAPI application serving the action API over the spreadsheet tables, with
CORS open to any origin so a browser client on another host can call it.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.models import HealthResponse
from repositories.client import Settings, create_sheets_client, load_settings
from repositories.sheet_table import Workbook
from services.sheet_service import SheetBackend

logger = logging.getLogger(__name__)


def build_backend(settings: Settings) -> SheetBackend:
    """
    Sheet backend for the configured storage.

    Raises:
        RuntimeError: for an unknown VYAPAR_SHEETS_BACKEND or missing
            Google Sheets configuration
    """
    if settings.sheets_backend == "memory":
        return SheetBackend(Workbook.in_memory())
    if settings.sheets_backend == "gspread":
        client = create_sheets_client(settings)
        return SheetBackend(Workbook.from_gspread(client, settings.spreadsheet_ids))
    raise RuntimeError(
        f"Invalid VYAPAR_SHEETS_BACKEND: {settings.sheets_backend!r}. Use 'memory' or 'gspread'."
    )


def create_app(backend: Optional[SheetBackend] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(
        title="Vyapar Pro Spreadsheet API",
        description="Action-dispatch API over the products, customers and sales sheets",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.backend = backend or build_backend(settings)
    app.state.sheets_backend = settings.sheets_backend if backend is None else "custom"
    logger.info(f"Spreadsheet endpoint using the {app.state.sheets_backend} backend")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check():
        """
        Health check endpoint.

        Returns the API status and version.
        """
        return {
            "status": "healthy",
            "version": __version__,
            "service": "vyapar-spreadsheet-api",
            "sheets_backend": app.state.sheets_backend,
        }

    # Import and include routers
    from api.routers import actions

    app.include_router(actions.router, tags=["Actions"])
    return app


app = create_app()
