from fastapi import APIRouter

from .health import health_router
from .resume import resume_router
from .essay import essay_router
from .delivery import delivery_router

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(resume_router, tags=["Resume"])
api_router.include_router(essay_router, tags=["Essay"])
api_router.include_router(delivery_router, tags=["Delivery"])

__all__ = ["api_router"]
