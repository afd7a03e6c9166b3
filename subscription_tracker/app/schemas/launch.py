"""Pydantic models for service launch tracking."""

from datetime import datetime

from .base import CamelModel


class ServiceLaunchRead(CamelModel):
    id: str
    subscription_id: str
    owner_email: str
    service_name: str
    launched_at: datetime


class LaunchResponse(CamelModel):
    success: bool = True
    launch: ServiceLaunchRead


class LaunchStat(CamelModel):
    """Launch count and latest launch for one service name."""

    service_name: str
    launch_count: int
    last_launched: datetime
