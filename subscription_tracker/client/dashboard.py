"""
Dashboard computations over subscription records.

Functions here take the camelCase dictionaries returned by the API
(``cost`` as a decimal string, dates as ISO timestamps) and never call
the server.  ``now`` is injectable everywhere so results are
reproducible.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional


UPCOMING_WINDOW_DAYS = 30
UPCOMING_LIMIT = 6

URGENCY_THRESHOLDS = (
    (3, "critical"),
    (7, "warning"),
    (30, "info"),
)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an API timestamp into an aware UTC datetime (``None`` stays ``None``)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _now(now: Optional[datetime]) -> datetime:
    return parse_datetime(now) if now is not None else datetime.now(timezone.utc)


def cost_of(subscription: Dict[str, Any]) -> float:
    return float(subscription.get("cost") or 0)


def days_until(value: Any, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days until ``value``, rounded up.  Negative once it has passed."""
    moment = parse_datetime(value)
    if moment is None:
        return None
    seconds = (moment - _now(now)).total_seconds()
    return math.ceil(seconds / 86400)


def monthly_cost(subscription: Dict[str, Any]) -> float:
    cost = cost_of(subscription)
    if subscription.get("billingCycle") == "annual":
        return cost / 12
    return cost


def annual_cost(subscription: Dict[str, Any]) -> float:
    cost = cost_of(subscription)
    if subscription.get("billingCycle") == "monthly":
        return cost * 12
    return cost


def _renews_within(subscription: Dict[str, Any], window: int, now: Optional[datetime]) -> bool:
    days = days_until(subscription.get("renewalDate"), now)
    return days is not None and 0 <= days <= window


def calculate_metrics(subscriptions: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Summary cards for the dashboard.  Only active subscriptions count."""
    active = [s for s in subscriptions if s.get("status") == "active"]
    return {
        "monthlyTotal": round(sum(monthly_cost(s) for s in active), 2),
        "annualTotal": round(sum(annual_cost(s) for s in active), 2),
        "activeCount": len(active),
        "expiringSoon": sum(1 for s in active if _renews_within(s, UPCOMING_WINDOW_DAYS, now)),
    }


def upcoming_renewals(
    subscriptions: Iterable[Dict[str, Any]],
    now: Optional[datetime] = None,
    *,
    window: int = UPCOMING_WINDOW_DAYS,
    limit: int = UPCOMING_LIMIT,
) -> List[Dict[str, Any]]:
    """Active subscriptions renewing in the next ``window`` days, soonest first."""
    due = [
        s for s in subscriptions
        if s.get("status") == "active" and _renews_within(s, window, now)
    ]
    due.sort(key=lambda s: parse_datetime(s["renewalDate"]))
    return due[:limit]


def expiration_urgency(value: Any, now: Optional[datetime] = None) -> Optional[str]:
    """``critical``, ``warning`` or ``info`` for an upcoming expiration date."""
    days = days_until(value, now)
    if days is None or days < 0:
        return None
    for threshold, level in URGENCY_THRESHOLDS:
        if days <= threshold:
            return level
    return None
