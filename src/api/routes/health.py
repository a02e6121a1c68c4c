"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/")
async def health_check(request: Request):
    """Health check - reports healthy only when the user store answers"""
    store = request.app.state.user_store

    try:
        await store.ping()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {type(e).__name__}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected"
    }
