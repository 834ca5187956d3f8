from fastapi import APIRouter

from waitstop.api.v1.endpoints import health, routes

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(routes.router, prefix="/routes", tags=["routes"])
