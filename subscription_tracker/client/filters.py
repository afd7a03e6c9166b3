"""
Filtering and sorting of the subscription list.

``SubscriptionFilters`` holds what the user picked in the dashboard
filter panel; ``apply_filters`` and ``sort_subscriptions`` turn a list
of API records into what is displayed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from .dashboard import cost_of, days_until, parse_datetime


DEFAULT_STATUSES = ["active", "expiring"]

# Both bounds inclusive.
COST_RANGES: Dict[str, Callable[[float], bool]] = {
    "under-10": lambda cost: cost < 10,
    "10-25": lambda cost: 10 <= cost <= 25,
    "25-50": lambda cost: 25 <= cost <= 50,
    "over-50": lambda cost: cost > 50,
}

RENEWAL_WINDOWS = {
    "next-7": 7,
    "next-30": 30,
    "next-90": 90,
}

SORT_OPTIONS = ("name", "cost-high", "cost-low", "renewal")


@dataclass
class SubscriptionFilters:
    search: str = ""
    category: str = ""
    statuses: List[str] = field(default_factory=lambda: list(DEFAULT_STATUSES))
    cost_ranges: List[str] = field(default_factory=list)
    renewal_window: str = ""


def _matches(subscription: Dict[str, Any], filters: SubscriptionFilters, now: Optional[datetime]) -> bool:
    search = filters.search.strip().lower()
    if search and search not in (subscription.get("name") or "").lower():
        return False
    if filters.category and filters.category != "all":
        if subscription.get("category") != filters.category:
            return False
    if filters.statuses and subscription.get("status") not in filters.statuses:
        return False
    if filters.cost_ranges:
        cost = cost_of(subscription)
        if not any(COST_RANGES[name](cost) for name in filters.cost_ranges if name in COST_RANGES):
            return False
    window = RENEWAL_WINDOWS.get(filters.renewal_window)
    if window is not None:
        days = days_until(subscription.get("renewalDate"), now)
        if days is None or not 0 <= days <= window:
            return False
    return True


def apply_filters(
    subscriptions: Iterable[Dict[str, Any]],
    filters: Optional[SubscriptionFilters] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    filters = filters or SubscriptionFilters()
    return [s for s in subscriptions if _matches(s, filters, now)]


def _renewal_key(subscription: Dict[str, Any]):
    # Missing dates sort last.
    moment = parse_datetime(subscription.get("renewalDate"))
    return (moment is None, moment.timestamp() if moment else 0.0)


def sort_subscriptions(subscriptions: Iterable[Dict[str, Any]], sort_by: str = "name") -> List[Dict[str, Any]]:
    """Return a sorted copy.  Unknown keys fall back to ``name``."""
    items = list(subscriptions)
    if sort_by == "cost-high":
        return sorted(items, key=cost_of, reverse=True)
    if sort_by == "cost-low":
        return sorted(items, key=cost_of)
    if sort_by == "renewal":
        return sorted(items, key=_renewal_key)
    return sorted(items, key=lambda s: (s.get("name") or "").lower())


def categories(subscriptions: Iterable[Dict[str, Any]]) -> List[str]:
    """Distinct categories, for the category drop-down."""
    return sorted({s["category"] for s in subscriptions if s.get("category")})
