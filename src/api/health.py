"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """Return application and static content status."""
    if getattr(request.app.state, "game_data", None) is None:
        return {"status": "error", "content": "not_loaded"}
    return {"status": "ok", "content": "loaded"}
