"""API router configuration."""

from fastapi import APIRouter

from app.api.v1.endpoints import health, reports, users, visits

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(reports.router, tags=["Reports"])
api_router.include_router(visits.router, tags=["Visits"])
api_router.include_router(users.router, tags=["Users"])
