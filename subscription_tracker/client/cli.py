#!/usr/bin/env python3
"""
Terminal dashboard for the Subscription Tracker API.

Each invocation signs in with ``--email`` (accounts are created on
first login) and then runs one command:

    subscription-tracker --email me@example.com login
    subscription-tracker --email me@example.com dashboard --sort cost-high --cost under-10
    subscription-tracker --email me@example.com marketplace --search music
    subscription-tracker --email me@example.com subscribe netflix netflix-standard
    subscription-tracker --email me@example.com launch <subscription-id>

The server URL defaults to ``$SUBSCRIPTION_TRACKER_URL`` or
``http://localhost:5000``.
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .api_client import SubscriptionTrackerClient
from .dashboard import calculate_metrics, days_until, expiration_urgency, upcoming_renewals
from .filters import COST_RANGES, RENEWAL_WINDOWS, SORT_OPTIONS, SubscriptionFilters, apply_filters, sort_subscriptions
from .marketplace import resolve_launch_url, search_services


DEFAULT_URL = "http://localhost:5000"


def _fail(error: Dict[str, Any]) -> int:
    print(f"[!] {error.get('message')} (HTTP {error.get('status_code')})", file=sys.stderr)
    return 1


def _format_subscription(sub: Dict[str, Any]) -> str:
    days = days_until(sub.get("renewalDate"))
    renews = f"renews in {days}d" if days is not None and days >= 0 else "renewal passed"
    line = f"  {sub['name']:<32} {sub['cost']:>9} /{sub['billingCycle']:<8} {sub['status']:<9} {renews}"
    urgency = expiration_urgency(sub.get("expirationDate"))
    if urgency:
        line += f"  [{urgency}: expires in {days_until(sub['expirationDate'])}d]"
    return line


def cmd_login(client: SubscriptionTrackerClient, user: Dict[str, Any], args) -> int:
    print(f"Signed in as {user['name']} <{user['email']}>")
    return 0


def cmd_dashboard(client: SubscriptionTrackerClient, user: Dict[str, Any], args) -> int:
    subscriptions, error = client.list_subscriptions()
    if error:
        return _fail(error)

    metrics = calculate_metrics(subscriptions)
    print(f"Dashboard for {user['email']}")
    print(f"  Monthly total:  {metrics['monthlyTotal']:.2f}")
    print(f"  Annual total:   {metrics['annualTotal']:.2f}")
    print(f"  Active:         {metrics['activeCount']}")
    print(f"  Renewing soon:  {metrics['expiringSoon']}")

    upcoming = upcoming_renewals(subscriptions)
    if upcoming:
        print("\nUpcoming renewals")
        for sub in upcoming:
            print(_format_subscription(sub))

    filters = SubscriptionFilters(
        search=args.search,
        category=args.category,
        cost_ranges=args.cost or [],
        renewal_window=args.renewal or "",
    )
    if args.status:
        filters.statuses = args.status
    shown = sort_subscriptions(apply_filters(subscriptions, filters), args.sort)
    print(f"\nSubscriptions ({len(shown)} of {len(subscriptions)})")
    for sub in shown:
        print(_format_subscription(sub))
    return 0


def cmd_marketplace(client: SubscriptionTrackerClient, user: Dict[str, Any], args) -> int:
    services, error = client.list_services()
    if error:
        return _fail(error)
    for service in search_services(services, args.search, args.category):
        popular = " *" if service.get("isPopular") else ""
        print(f"{service['name']}{popular} [{service['category']}] id={service['id']}")
        for plan in service.get("plans") or []:
            print(f"    {plan['id']:<28} {plan['name']:<20} {plan['price']:>8.2f} /{plan['billingCycle']}")
    return 0


def cmd_subscribe(client: SubscriptionTrackerClient, user: Dict[str, Any], args) -> int:
    subscription, error = client.subscribe(args.service_id, args.plan_id)
    if error:
        return _fail(error)
    print(f"Subscribed: {subscription['name']} ({subscription['id']})")
    print(_format_subscription(subscription))
    return 0


def cmd_launch(client: SubscriptionTrackerClient, user: Dict[str, Any], args) -> int:
    subscription, error = client.get_subscription(args.subscription_id)
    if error:
        return _fail(error)
    launch, error = client.launch(args.subscription_id)
    if error:
        return _fail(error)
    url = resolve_launch_url(subscription)
    print(f"Launched {launch['serviceName']} at {launch['launchedAt']}")
    if url:
        print(f"Open: {url}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="subscription-tracker", description="Terminal dashboard for tracked subscriptions.")
    ap.add_argument("--url", default=os.getenv("SUBSCRIPTION_TRACKER_URL", DEFAULT_URL), help="API server URL")
    ap.add_argument("--email", required=True, help="Account email (created on first login)")
    ap.add_argument("--name", help="Display name used when the account is created")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests")
    sub = ap.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and show the account")
    login.set_defaults(handler=cmd_login)

    dash = sub.add_parser("dashboard", help="Show metrics, upcoming renewals and subscriptions")
    dash.add_argument("--search", default="", help="Substring of the subscription name")
    dash.add_argument("--category", default="", help="Only this category ('all' for any)")
    dash.add_argument("--status", action="append", help="Status to include; repeatable (default: active, expiring)")
    dash.add_argument("--cost", action="append", choices=sorted(COST_RANGES), help="Cost range; repeatable")
    dash.add_argument("--renewal", choices=sorted(RENEWAL_WINDOWS), help="Renewal window")
    dash.add_argument("--sort", default="name", choices=SORT_OPTIONS)
    dash.set_defaults(handler=cmd_dashboard)

    market = sub.add_parser("marketplace", help="Browse services available to subscribe to")
    market.add_argument("--search", default="")
    market.add_argument("--category", default="")
    market.set_defaults(handler=cmd_marketplace)

    subscribe = sub.add_parser("subscribe", help="Subscribe to a marketplace plan")
    subscribe.add_argument("service_id")
    subscribe.add_argument("plan_id")
    subscribe.set_defaults(handler=cmd_subscribe)

    launch = sub.add_parser("launch", help="Record a launch and print the service URL")
    launch.add_argument("subscription_id")
    launch.set_defaults(handler=cmd_launch)
    return ap


def main(argv: Optional[List[str]] = None, client: Optional[SubscriptionTrackerClient] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    client = client or SubscriptionTrackerClient(base_url=args.url)
    user, error = client.login(args.email, args.name)
    if error:
        return _fail(error)
    return args.handler(client, user, args)


if __name__ == "__main__":
    sys.exit(main())
