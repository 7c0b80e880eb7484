"""Cache monitoring endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/v1/cache/stats")
async def get_cache_stats(request: Request) -> JSONResponse:
    """Get response cache statistics."""
    return JSONResponse(content={"response_cache": request.app.state.cache_store.get_stats()})


@router.post("/v1/cache/clear")
async def clear_cache(request: Request) -> JSONResponse:
    """Drop every cached response."""
    await request.app.state.cache_store.clear()
    return JSONResponse(content={"status": "caches_cleared"})
