"""
Top-level API router.

Aggregates the domain routers under the ``/api`` prefix applied in
``main.create_app``.  When new endpoint modules are added, include
them here.
"""

from fastapi import APIRouter

from .endpoints import auth, available_services, subscriptions, users


router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(subscriptions.router, prefix="/subscriptions", tags=["subscriptions"])
router.include_router(available_services.router, prefix="/available-services", tags=["marketplace"])
router.include_router(users.router, prefix="/users", tags=["users"])
