"""API routers for the nearby flights service."""

from fastapi import APIRouter

from .flights import router as flights_router
from .flights import validation_exception_handler
from .health import router as health_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(flights_router)

__all__ = ["api_router", "validation_exception_handler"]
