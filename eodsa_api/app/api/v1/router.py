"""
Top-level router for version 1 of the API.

Aggregates the domain routers.  When a new domain is added, include
its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    admin,
    auth,
    contestants,
    dancers,
    entries,
    events,
    judges,
    rankings,
    scores,
    studios,
)

router = APIRouter()

router.include_router(dancers.router, prefix="/dancers", tags=["dancers"])
router.include_router(studios.router, prefix="/studios", tags=["studios"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(entries.router, prefix="/event-entries", tags=["entries"])
router.include_router(judges.router, prefix="/judges", tags=["judges"])
router.include_router(scores.router, prefix="/scores", tags=["scores"])
router.include_router(rankings.router, prefix="/rankings", tags=["rankings"])
router.include_router(contestants.router, prefix="/contestants", tags=["contestants"])
