# api/main.py
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api.routes.catalog import router as catalog_router
from catalog.errors import NotFound, StoreError, UnknownKind
from catalog.sa import Database, SqlEntityStore
from catalog.services import CatalogHandler
from catalog.log import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"

def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the catalog API around one database.

    Args:
        database: Database to serve; defaults to one built from DATABASE_URL
    """
    configure_logging()
    app = FastAPI(title="Local Library")

    # CORS configuration
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", DEFAULT_ORIGINS).split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.database = database or Database()
    app.state.store = SqlEntityStore(app.state.database)
    app.state.handler = CatalogHandler(app.state.store)

    # Initialize database on startup
    @app.on_event("startup")
    def startup_event():
        app.state.database.init_db()

    @app.on_event("shutdown")
    def shutdown_event():
        app.state.database.dispose()

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(UnknownKind)
    async def unknown_kind_handler(request: Request, exc: UnknownKind):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        return {"message": "Local Library", "catalog": "/catalog/"}

    app.include_router(catalog_router)
    return app

app = create_app()
