"""
Marketplace browsing helpers and launch URL resolution.
"""

from typing import Any, Dict, Iterable, List, Optional


# Fallback launch targets for services whose record has no launchUrl.
# Matched by case-insensitive substring of the name, first match wins.
KNOWN_SERVICE_URLS = (
    ("netflix", "https://www.netflix.com"),
    ("amazon prime", "https://www.primevideo.com"),
    ("prime video", "https://www.primevideo.com"),
    ("disney", "https://www.disneyplus.com"),
    ("hbo", "https://www.max.com"),
    ("apple tv", "https://tv.apple.com"),
    ("hulu", "https://www.hulu.com"),
    ("youtube", "https://www.youtube.com/premium"),
    ("spotify", "https://open.spotify.com"),
    ("paramount", "https://www.paramountplus.com"),
    ("peacock", "https://www.peacocktv.com"),
)


def search_services(
    services: Iterable[Dict[str, Any]],
    search: str = "",
    category: str = "",
) -> List[Dict[str, Any]]:
    """Filter catalog entries by a name/description substring and category."""
    needle = search.strip().lower()
    results = []
    for service in services:
        if category and category != "all" and service.get("category") != category:
            continue
        if needle:
            haystack = f"{service.get('name') or ''} {service.get('description') or ''}".lower()
            if needle not in haystack:
                continue
        results.append(service)
    return results


def service_categories(services: Iterable[Dict[str, Any]]) -> List[str]:
    return sorted({s["category"] for s in services if s.get("category")})


def find_plan(service: Dict[str, Any], plan_id: str) -> Optional[Dict[str, Any]]:
    return next((plan for plan in service.get("plans") or [] if plan.get("id") == plan_id), None)


def resolve_launch_url(record: Dict[str, Any]) -> Optional[str]:
    """Return where to open a service or subscription.

    Uses ``launchUrl`` when present, otherwise looks the name up in
    ``KNOWN_SERVICE_URLS``.  Subscriptions created from the marketplace
    are named ``"<service> - <plan>"`` so substring matching covers them.
    """
    if record.get("launchUrl"):
        return record["launchUrl"]
    name = (record.get("name") or record.get("serviceName") or "").lower()
    for fragment, url in KNOWN_SERVICE_URLS:
        if fragment in name:
            return url
    return None
