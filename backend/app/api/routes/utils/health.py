import logging

from fastapi import APIRouter

from app.api.deps import FlowRelayDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health-check")
async def health_check(relay: FlowRelayDep):
    """
    Health check endpoint that verifies the relay store is reachable.
    """
    try:
        records = relay.store.count()
        store_status = "healthy"
    except Exception as e:
        logger.error(f"Flow store health check failed: {e}")
        records = None
        store_status = "unhealthy"

    return {
        "status": store_status,
        "message": "Relay is running",
        "store": {"status": store_status, "records": records},
    }
