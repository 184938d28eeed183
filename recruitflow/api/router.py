"""
Top-level API router.

Public endpoints sit at the root of the API prefix; staff endpoints
live under /hr and require a bearer token.
"""

from fastapi import APIRouter

from recruitflow.api.endpoints import (
    applications,
    auth,
    dashboard,
    health,
    job_positions,
    public,
    schedules,
    users,
)

hr_router = APIRouter(prefix="/hr")
hr_router.include_router(users.router)
hr_router.include_router(job_positions.router)
hr_router.include_router(applications.router)
hr_router.include_router(schedules.router)
hr_router.include_router(dashboard.router)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(public.router)
api_router.include_router(hr_router)
