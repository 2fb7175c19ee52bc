"""
Main API router for JobPrep

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from jobprep.api.endpoints import interview, outreach, metadata

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/mock-interview",
    tags=["Mock Interview"]
)

api_router.include_router(
    outreach.router,
    prefix="/outreach",
    tags=["Outreach"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)
