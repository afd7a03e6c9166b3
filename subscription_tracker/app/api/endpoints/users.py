"""
User usage endpoints.

``/launch-stats`` aggregates the caller's service launches per service
name.
"""

from typing import List

from fastapi import APIRouter, Depends

from subscription_tracker.app.api.endpoints.subscriptions import get_repository
from subscription_tracker.app.schemas.launch import LaunchStat
from subscription_tracker.app.services.subscription_service import SubscriptionRepository


router = APIRouter()


@router.get("/launch-stats", response_model=List[LaunchStat])
async def launch_stats(repo: SubscriptionRepository = Depends(get_repository)) -> List[LaunchStat]:
    """Launch count and last launch time per service, most recently launched first."""
    return await repo.launch_stats()
