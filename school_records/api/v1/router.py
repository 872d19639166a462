"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from school_records.api.v1.endpoints import (
    marks,
    profiles,
    sessions,
)

api_router = APIRouter()

# Sessions & promotion
api_router.include_router(
    sessions.router,
    prefix="/sessions",
    tags=["Sessions"],
)

# Marks & result sheets
api_router.include_router(
    marks.router,
    prefix="/marks",
    tags=["Marks"],
)

# Holistic profiles
api_router.include_router(
    profiles.router,
    prefix="/profiles",
    tags=["Profiles"],
)
