"""
API layer for JobPrep

Contains FastAPI routers for:
- Mock interview sessions
- Outreach messages
- Reference metadata
"""

from jobprep.api.router import api_router

__all__ = ["api_router"]
