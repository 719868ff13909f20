"""
Health check router for uptime monitoring.

Returns a constant payload without touching the database so load balancers
and orchestrators get a fast answer even when the store is degraded.

Example:
    ```bash
    curl http://localhost:8000/healthz
    # {"ok": true}
    ```
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=dict[str, bool])
def healthz() -> dict[str, bool]:
    """Report that the API process is up."""
    return {"ok": True}
