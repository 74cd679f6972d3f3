"""FastAPI application entry point."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from toneguide.api import router as api_router
from toneguide.core.errors import LoadError
from toneguide.core.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="ToneGuide",
    description="Guideline-driven rewrites of UI strings in the brand voice",
    version="0.1.0",
)


@app.exception_handler(LoadError)
async def load_error_handler(request: Request, exc: LoadError) -> JSONResponse:
    """A broken guideline corpus leaves nothing to fall back on."""
    logger.error(f"Guideline corpus failed to load: {exc}")
    return JSONResponse(content={"detail": "Guideline corpus unavailable"}, status_code=500)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])
