"""API v1 routes."""

from fastapi import APIRouter

from shiftlink.api.v1 import (
    analytics,
    applications,
    auth,
    employers,
    jobs,
    newsletter,
    reviews,
    search,
    users,
    verification,
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
api_router.include_router(search.router, prefix="/search", tags=["Search"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
api_router.include_router(reviews.router, tags=["Reviews"])
api_router.include_router(employers.router, prefix="/employers", tags=["Employers"])
api_router.include_router(verification.router, prefix="/verification", tags=["Verification"])
api_router.include_router(analytics.router, tags=["Analytics"])
api_router.include_router(newsletter.router, prefix="/newsletter", tags=["Newsletter"])
