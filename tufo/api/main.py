from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from tufo.config import get_settings
from tufo.db import init_db
from tufo.errors import NotFoundError, ValidationFailure
from tufo.api.routers import (
    areas_router,
    climbs_router,
    search_router,
    imports_router,
    seed_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure tables exist
    init_db()
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title="Tufo API",
        description="Climbing route catalog: areas, climbs, media, notes and OpenBeta import",
        version="1.0.0",
        lifespan=lifespan if create_tables else None,
    )

    # CORS configuration
    cors_origins = get_settings().cors_origins.split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationFailure)
    async def validation_handler(request: Request, exc: ValidationFailure):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    # Include routers
    app.include_router(areas_router)
    app.include_router(climbs_router)
    app.include_router(search_router)
    app.include_router(imports_router)
    app.include_router(seed_router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "tufo-api"}

    @app.get("/")
    def root():
        return {
            "message": "Welcome to Tufo API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
