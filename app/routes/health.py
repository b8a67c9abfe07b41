"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness probe. Does not touch the store or the inference service."""
    return {"status": "healthy", "service": "feedback-lens"}
