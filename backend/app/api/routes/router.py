from fastapi import APIRouter
from .utils.health import router as health_router
from .status import router as status_router

router = APIRouter()
router.include_router(health_router, prefix="/utils")
router.include_router(status_router)
