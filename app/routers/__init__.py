from fastapi import APIRouter

from app.routers import (
    canceled_request,
    data_connector,
    process,
    process_request,
    script,
    user,
)

api_router = APIRouter()
api_router.include_router(user.router)
api_router.include_router(process.router)
api_router.include_router(script.router)
api_router.include_router(process_request.router)
api_router.include_router(canceled_request.router)
api_router.include_router(data_connector.router)

__all__ = ["api_router"]
