from datetime import datetime, timedelta, timezone

import pytest

from subscription_tracker.client.dashboard import (
    calculate_metrics,
    days_until,
    expiration_urgency,
    upcoming_renewals,
)
from subscription_tracker.client.filters import (
    SubscriptionFilters,
    apply_filters,
    categories,
    sort_subscriptions,
)
from subscription_tracker.client.marketplace import (
    find_plan,
    resolve_launch_url,
    search_services,
    service_categories,
)


NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def in_days(days: float) -> str:
    return (NOW + timedelta(days=days)).isoformat().replace("+00:00", "Z")


def sub(name="Netflix", cost="10.00", cycle="monthly", status="active", renews=40, expires=None, category="Streaming"):
    return {
        "id": name.lower(),
        "name": name,
        "category": category,
        "cost": cost,
        "billingCycle": cycle,
        "status": status,
        "renewalDate": in_days(renews) if renews is not None else None,
        "expirationDate": in_days(expires) if expires is not None else None,
    }


def test_days_until_rounds_up():
    assert days_until(in_days(1.5), NOW) == 2
    assert days_until(in_days(1), NOW) == 1
    assert days_until(in_days(0.01), NOW) == 1
    assert days_until(in_days(-1), NOW) == -1
    assert days_until(None, NOW) is None


def test_metrics_count_only_active_subscriptions():
    subscriptions = [
        sub("Netflix", cost="10.00", renews=5),
        sub("Disney+", cost="120.00", cycle="annual", renews=60),
        sub("Hulu", cost="50.00", status="inactive", renews=2),
        sub("Max", cost="16.00", status="expiring", renews=3),
    ]

    metrics = calculate_metrics(subscriptions, NOW)

    assert metrics == {"monthlyTotal": 20.0, "annualTotal": 240.0, "activeCount": 2, "expiringSoon": 1}


def test_metrics_of_nothing():
    assert calculate_metrics([], NOW) == {"monthlyTotal": 0, "annualTotal": 0, "activeCount": 0, "expiringSoon": 0}


def test_upcoming_renewals_soonest_first_and_capped():
    subscriptions = [sub(f"S{day}", renews=day) for day in (8, 3, 1, 30, 5, 2, 7)]
    subscriptions += [sub("Far", renews=31), sub("Past", renews=-1), sub("Off", status="inactive", renews=1)]

    upcoming = upcoming_renewals(subscriptions, NOW)

    assert [s["name"] for s in upcoming] == ["S1", "S2", "S3", "S5", "S7", "S8"]


@pytest.mark.parametrize(
    "days, level",
    [(0.5, "critical"), (3, "critical"), (5, "warning"), (7, "warning"), (20, "info"), (30, "info"), (31, None), (-2, None)],
)
def test_expiration_urgency(days, level):
    assert expiration_urgency(in_days(days), NOW) == level


def test_expiration_urgency_without_date():
    assert expiration_urgency(None, NOW) is None


def test_cost_ranges_match_any_selected_bucket():
    subscriptions = [sub("A", cost="5"), sub("B", cost="15"), sub("C", cost="60")]

    result = apply_filters(subscriptions, SubscriptionFilters(cost_ranges=["under-10", "over-50"]), NOW)

    assert [s["cost"] for s in result] == ["5", "60"]


def test_cost_range_bounds_are_inclusive():
    subscriptions = [sub("Ten", cost="10"), sub("TwentyFive", cost="25"), sub("Fifty", cost="50")]

    middle = apply_filters(subscriptions, SubscriptionFilters(cost_ranges=["10-25"]), NOW)
    upper = apply_filters(subscriptions, SubscriptionFilters(cost_ranges=["25-50"]), NOW)

    assert [s["name"] for s in middle] == ["Ten", "TwentyFive"]
    assert [s["name"] for s in upper] == ["TwentyFive", "Fifty"]


def test_default_filters_hide_inactive():
    subscriptions = [sub("A"), sub("B", status="expiring"), sub("C", status="inactive")]

    assert [s["name"] for s in apply_filters(subscriptions, now=NOW)] == ["A", "B"]
    assert len(apply_filters(subscriptions, SubscriptionFilters(statuses=[]), NOW)) == 3


def test_search_and_category_filters():
    subscriptions = [sub("Netflix"), sub("Spotify", category="Music"), sub("Netflix Kids")]

    by_name = apply_filters(subscriptions, SubscriptionFilters(search="  NETFLIX "), NOW)
    by_category = apply_filters(subscriptions, SubscriptionFilters(category="Music"), NOW)
    any_category = apply_filters(subscriptions, SubscriptionFilters(category="all"), NOW)

    assert [s["name"] for s in by_name] == ["Netflix", "Netflix Kids"]
    assert [s["name"] for s in by_category] == ["Spotify"]
    assert len(any_category) == 3
    assert categories(subscriptions) == ["Music", "Streaming"]


def test_renewal_window_filter():
    subscriptions = [sub("Week", renews=6), sub("Month", renews=25), sub("Quarter", renews=80), sub("Past", renews=-3)]

    def names(window):
        return [s["name"] for s in apply_filters(subscriptions, SubscriptionFilters(renewal_window=window), NOW)]

    assert names("next-7") == ["Week"]
    assert names("next-30") == ["Week", "Month"]
    assert names("next-90") == ["Week", "Month", "Quarter"]
    assert names("") == ["Week", "Month", "Quarter", "Past"]


def test_sorting():
    subscriptions = [
        sub("beta", cost="20", renews=10),
        sub("Alpha", cost="5", renews=None),
        sub("charlie", cost="12.5", renews=2),
    ]

    def names(key):
        return [s["name"] for s in sort_subscriptions(subscriptions, key)]

    assert names("name") == ["Alpha", "beta", "charlie"]
    assert names("cost-high") == ["beta", "charlie", "Alpha"]
    assert names("cost-low") == ["Alpha", "charlie", "beta"]
    assert names("renewal") == ["charlie", "beta", "Alpha"]
    assert names("bogus") == ["Alpha", "beta", "charlie"]


SERVICES = [
    {"id": "netflix", "name": "Netflix", "category": "Streaming", "description": "Films and series",
     "launchUrl": "https://www.netflix.com", "plans": [{"id": "netflix-standard", "name": "Standard"}]},
    {"id": "spotify", "name": "Spotify", "category": "Music", "description": "Music and podcasts",
     "plans": []},
    {"id": "peacock", "name": "Peacock", "category": "Streaming", "description": "NBC shows"},
]


def test_marketplace_search():
    assert [s["id"] for s in search_services(SERVICES, "podcast")] == ["spotify"]
    assert [s["id"] for s in search_services(SERVICES, "NET")] == ["netflix"]
    assert [s["id"] for s in search_services(SERVICES, category="Streaming")] == ["netflix", "peacock"]
    assert [s["id"] for s in search_services(SERVICES, "shows", "Streaming")] == ["peacock"]
    assert search_services(SERVICES, "music", "Streaming") == []
    assert service_categories(SERVICES) == ["Music", "Streaming"]


def test_find_plan():
    assert find_plan(SERVICES[0], "netflix-standard")["name"] == "Standard"
    assert find_plan(SERVICES[0], "missing") is None
    assert find_plan(SERVICES[2], "anything") is None


def test_resolve_launch_url():
    assert resolve_launch_url({"name": "Custom", "launchUrl": "https://example.com/app"}) == "https://example.com/app"
    assert resolve_launch_url({"name": "Disney+ - Premium"}) == "https://www.disneyplus.com"
    assert resolve_launch_url({"name": "Amazon Prime Video"}) == "https://www.primevideo.com"
    assert resolve_launch_url({"name": "HBO Max"}) == "https://www.max.com"
    assert resolve_launch_url({"serviceName": "Peacock Premium"}) == "https://www.peacocktv.com"
    assert resolve_launch_url({"name": "Local Gym"}) is None
