"""
FastAPI Application
==================
Main entry point for the Contract Audit API.

Run with:
    uvicorn contract_audit.web_api.main:app --reload
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contract_audit import __version__
from contract_audit.contracts.load import REQUEST_SCHEMA, RESULT_SCHEMA, load_schema
from contract_audit.web_api.config import settings
from contract_audit.web_api.routers import analyze, health

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schemas are parsed once, at startup.
    load_schema(REQUEST_SCHEMA)
    load_schema(RESULT_SCHEMA)
    _logger.info(
        "contract analysis API %s ready (max source %d bytes, workers=%s)",
        __version__,
        settings.MAX_SOURCE_BYTES,
        settings.ANALYZER_WORKERS or "inline",
    )
    yield


app = FastAPI(
    title="Contract Analysis API",
    description="Heuristic smart-contract linting with weighted category scores",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(analyze.router, tags=["Analyze"])


@app.get("/")
async def root():
    """API name, version and where the docs live."""
    return {
        "name": "Contract Analysis API",
        "version": __version__,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
