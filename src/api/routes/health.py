"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException

from database.documents import DocumentStore, StoreError
from api.dependencies import get_store

router = APIRouter()


@router.get("/health")
async def health_check(store: DocumentStore = Depends(get_store)):
    """Health check - reports unhealthy only when the store cannot be reached"""
    try:
        await store.ping()
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store": type(store).__name__,
    }
