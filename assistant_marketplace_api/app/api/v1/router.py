"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When a new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    assistants,
    auth,
    bookings,
    categories,
    messages,
    reviews,
    services,
    users,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(assistants.router, prefix="/assistants", tags=["assistants"])
router.include_router(categories.router, prefix="/service-categories", tags=["service-categories"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
