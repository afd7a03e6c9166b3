"""
Subscription endpoints.

Every route requires a logged in user and works through a
``SubscriptionRepository`` bound to that user's email, so ids that
belong to other users simply come back as 404.  Static paths
(``/expiring``, ``/subscribe``) are declared before ``/{subscription_id}``.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from subscription_tracker.app.core.security import RequestContext, require_auth
from subscription_tracker.app.schemas.available_service import SubscribeRequest
from subscription_tracker.app.schemas.launch import LaunchResponse
from subscription_tracker.app.schemas.subscription import SubscriptionCreate, SubscriptionRead, SubscriptionUpdate
from subscription_tracker.app.services.subscription_service import SubscriptionRepository, SubscriptionService


router = APIRouter()


def get_repository(ctx: RequestContext = Depends(require_auth)) -> SubscriptionRepository:
    """Repository scoped to the authenticated caller."""
    return SubscriptionRepository(ctx.owner_email)


@router.get("", response_model=List[SubscriptionRead])
async def list_subscriptions(repo: SubscriptionRepository = Depends(get_repository)) -> List[SubscriptionRead]:
    return await repo.list()


@router.get("/expiring", response_model=List[SubscriptionRead])
async def list_expiring_subscriptions(
    days: int = Query(30, ge=0, description="Look-ahead window in days"),
    repo: SubscriptionRepository = Depends(get_repository),
) -> List[SubscriptionRead]:
    """Subscriptions whose expiration date falls within the next ``days`` days (today included)."""
    return await repo.list_expiring(days)


@router.post("/subscribe", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def subscribe_to_service(
    payload: SubscribeRequest,
    repo: SubscriptionRepository = Depends(get_repository),
) -> SubscriptionRead:
    """One-click subscription to a marketplace service plan.

    Renewal and expiration are set one billing period from now.
    404 if the service or the plan does not exist.
    """
    return await SubscriptionService.subscribe(repo, payload.service_id, payload.plan_id)


@router.get("/{subscription_id}", response_model=SubscriptionRead)
async def get_subscription(
    subscription_id: str,
    repo: SubscriptionRepository = Depends(get_repository),
) -> SubscriptionRead:
    return await repo.get(subscription_id)


@router.post("", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    subscription: SubscriptionCreate,
    repo: SubscriptionRepository = Depends(get_repository),
) -> SubscriptionRead:
    return await repo.create(subscription)


@router.patch("/{subscription_id}", response_model=SubscriptionRead)
async def update_subscription(
    subscription_id: str,
    updates: SubscriptionUpdate,
    repo: SubscriptionRepository = Depends(get_repository),
) -> SubscriptionRead:
    """Partially update a subscription; fields left out stay unchanged."""
    return await repo.update(subscription_id, updates.changes())


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: str,
    repo: SubscriptionRepository = Depends(get_repository),
) -> Response:
    await repo.delete(subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{subscription_id}/launch", response_model=LaunchResponse)
async def launch_subscription(
    subscription_id: str,
    repo: SubscriptionRepository = Depends(get_repository),
) -> LaunchResponse:
    """Record that the user opened the service and bump ``lastUsed``."""
    launch = await repo.track_launch(subscription_id)
    return LaunchResponse(success=True, launch=launch)
