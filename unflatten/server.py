"""FastAPI backend for unflatten."""

import logging
from typing import Optional, List, Dict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from unflatten import __version__
from unflatten.config import get_settings
from unflatten.core.errors import UnflattenError
from unflatten.tracing.path_resolver import PathResolver
from unflatten.tracing.registry import FileRegistry
from unflatten.utils.rewriter import add_base_path_to_imports

logger = logging.getLogger("uvicorn.error")


app = FastAPI(
    title="unflatten API",
    description="Recovers the directory layout of flattened source listings from their imports.",
    version=__version__,
)


class ResolveRequest(BaseModel):
    """Request schema for /resolve endpoint."""
    files: Dict[str, str]
    base_path: Optional[str] = None


class ResolvedFile(BaseModel):
    name: str
    directory: str
    content: Optional[str] = None


class ResolveResponse(BaseModel):
    """Response schema for /resolve endpoint."""
    paths: Dict[str, str]
    files: List[ResolvedFile]
    sweeps: List[int]
    seeded: List[str]
    estimated: Dict[str, int]


@app.post("/resolve", response_model=ResolveResponse)
async def resolve(request: ResolveRequest):
    """Resolve the directory of every posted file."""
    if not request.files:
        raise HTTPException(status_code=400, detail="files must not be empty")

    try:
        registry = FileRegistry.from_sources(request.files)
        report = PathResolver(registry, placeholder=get_settings().placeholder).resolve()
        if request.base_path:
            add_base_path_to_imports(registry, request.base_path)
    except (UnflattenError, ValueError) as e:
        logger.warning(f"Resolution failed: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return ResolveResponse(
        paths={record.name: record.relative_dir for record in registry},
        files=[
            ResolvedFile(
                name=record.name,
                directory=record.relative_dir,
                content=record.raw_content if request.base_path else None,
            )
            for record in registry
        ],
        sweeps=report.sweeps,
        seeded=report.seeded,
        estimated=report.estimated,
    )


@app.api_route("/health", methods=["GET", "HEAD"])
async def health():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/info")
async def info():
    """Get API information."""
    settings = get_settings()
    return {
        "version": __version__,
        "api_version": "v1",
        "placeholder": settings.placeholder,
        "endpoints": {
            "resolve": "/resolve",
            "health": "/health",
            "info": "/info",
        },
    }


@app.on_event("startup")
async def startup_event():
    """Log startup info."""
    logger.info(f"unflatten API v{__version__} ready")
    logger.info("Endpoints: /resolve, /health, /info")
