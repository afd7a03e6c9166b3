import asyncio
import json
import uuid
from datetime import datetime, timezone

import pytest

from conftest import login
from subscription_tracker.app.core.db import get_connection
from subscription_tracker.app.seed_catalog import load_catalog, main as seed_main
from subscription_tracker.app.services.catalog_service import CATALOG_NAMESPACE, CatalogService
from subscription_tracker.app.services.subscription_service import (
    SubscriptionRepository,
    SubscriptionService,
    add_months,
)


UTC = timezone.utc


def test_catalog_is_public(client, catalog):
    services = client.get("/api/available-services").json()

    assert len(services) == 6
    netflix = next(s for s in services if s["id"] == "netflix")
    assert netflix["basePrice"] == "6.99"
    assert netflix["isPopular"] is True
    assert netflix["launchUrl"] == "https://www.netflix.com"
    assert {p["id"] for p in netflix["plans"]} == {"netflix-basic-ads", "netflix-standard", "netflix-premium"}
    # Popular services come first.
    popular = [s["isPopular"] for s in services]
    assert popular == sorted(popular, reverse=True)


def test_get_available_service(client, catalog):
    assert client.get("/api/available-services/spotify").json()["name"] == "Spotify"

    response = client.get("/api/available-services/unknown")
    assert response.status_code == 404
    assert response.json() == {"message": "Service not found"}


def test_subscribe_creates_subscription(client, catalog):
    user = login(client)

    response = client.post("/api/subscriptions/subscribe", json={"serviceId": "hulu", "planId": "hulu-ads"})

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Hulu - With Ads"
    assert body["cost"] == "9.99"
    assert body["billingCycle"] == "monthly"
    assert body["status"] == "active"
    assert body["category"] == "Streaming"
    assert body["ownerEmail"] == user["email"]
    assert body["renewalDate"] == body["expirationDate"]
    assert [s["id"] for s in client.get("/api/subscriptions").json()] == [body["id"]]


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"serviceId": "unknown", "planId": "hulu-ads"}, "Service not found"),
        ({"serviceId": "hulu", "planId": "netflix-premium"}, "Plan not found"),
    ],
)
def test_subscribe_unknown_service_or_plan(client, catalog, payload, message):
    login(client)

    response = client.post("/api/subscriptions/subscribe", json=payload)

    assert response.status_code == 404
    assert response.json() == {"message": message}
    assert client.get("/api/subscriptions").json() == []


def test_subscribe_requires_both_ids(client, catalog):
    login(client)

    response = client.post("/api/subscriptions/subscribe", json={"serviceId": "hulu"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "planId"


@pytest.mark.parametrize(
    "service_id, plan_id, cost, renewal",
    [
        ("hulu", "hulu-ads", "9.99", datetime(2025, 2, 1, tzinfo=UTC)),
        ("disney-plus", "disney-premium-annual", "139.99", datetime(2026, 1, 1, tzinfo=UTC)),
    ],
)
def test_subscribe_dates_follow_billing_cycle(catalog, service_id, plan_id, cost, renewal):
    repo = SubscriptionRepository("dana@example.com")
    now = datetime(2025, 1, 1, tzinfo=UTC)

    created = asyncio.run(SubscriptionService.subscribe(repo, service_id, plan_id, now=now))

    assert created.cost == cost
    assert created.renewal_date == renewal
    assert created.expiration_date == renewal
    assert created.last_used == now


def test_month_arithmetic_clamps_to_month_end():
    assert add_months(datetime(2025, 1, 31, tzinfo=UTC), 1) == datetime(2025, 2, 28, tzinfo=UTC)
    assert add_months(datetime(2024, 1, 31, tzinfo=UTC), 1) == datetime(2024, 2, 29, tzinfo=UTC)
    assert add_months(datetime(2024, 2, 29, tzinfo=UTC), 12) == datetime(2025, 2, 28, tzinfo=UTC)
    assert add_months(datetime(2025, 12, 15, 8, 30, tzinfo=UTC), 1) == datetime(2026, 1, 15, 8, 30, tzinfo=UTC)


def test_launch_records_usage(client):
    login(client)
    created = client.post(
        "/api/subscriptions",
        json={
            "name": "Spotify",
            "category": "Music",
            "cost": "11.99",
            "billingCycle": "monthly",
            "renewalDate": "2025-01-15",
            "status": "active",
        },
    ).json()

    response = client.post(f"/api/subscriptions/{created['id']}/launch")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["launch"]["subscriptionId"] == created["id"]
    assert body["launch"]["serviceName"] == "Spotify"
    refreshed = client.get(f"/api/subscriptions/{created['id']}").json()
    assert refreshed["lastUsed"] == body["launch"]["launchedAt"]

    stats = client.get("/api/users/launch-stats").json()
    assert stats == [
        {"serviceName": "Spotify", "launchCount": 1, "lastLaunched": body["launch"]["launchedAt"]}
    ]


def test_launch_unknown_subscription_is_404(client):
    login(client)

    response = client.post("/api/subscriptions/missing/launch")

    assert response.status_code == 404
    assert client.get("/api/users/launch-stats").json() == []


def test_launch_stats_order_and_history(catalog):
    repo = SubscriptionRepository("erin@example.com")
    other = SubscriptionRepository("frank@example.com")

    async def scenario():
        netflix = await SubscriptionService.subscribe(repo, "netflix", "netflix-standard")
        spotify = await SubscriptionService.subscribe(repo, "spotify", "spotify-duo")
        foreign = await SubscriptionService.subscribe(other, "hulu", "hulu-ads")
        await repo.track_launch(netflix.id, now=datetime(2025, 1, 1, tzinfo=UTC))
        await repo.track_launch(spotify.id, now=datetime(2025, 1, 2, tzinfo=UTC))
        await repo.track_launch(netflix.id, now=datetime(2025, 1, 3, tzinfo=UTC))
        await other.track_launch(foreign.id, now=datetime(2025, 1, 4, tzinfo=UTC))
        first = await repo.launch_stats()
        await repo.delete(netflix.id)
        await repo.track_launch(spotify.id, now=datetime(2025, 1, 5, tzinfo=UTC))
        return first, await repo.launch_stats()

    first, second = asyncio.run(scenario())

    assert [(s.service_name, s.launch_count) for s in first] == [
        ("Netflix - Standard", 2),
        ("Spotify - Duo", 1),
    ]
    assert first[0].last_launched == datetime(2025, 1, 3, tzinfo=UTC)
    # Launch history outlives the deleted subscription.
    assert [(s.service_name, s.launch_count) for s in second] == [
        ("Spotify - Duo", 2),
        ("Netflix - Standard", 2),
    ]


def test_seed_is_idempotent(db_path):
    asyncio.run(CatalogService.seed(load_catalog(None)))
    before = asyncio.run(CatalogService.get_service("netflix"))

    count = asyncio.run(CatalogService.seed(load_catalog(None)))
    after = asyncio.run(CatalogService.get_service("netflix"))

    assert count == 6
    assert after.created_at == before.created_at
    conn = get_connection()
    try:
        assert conn.execute("SELECT COUNT(*) FROM available_services").fetchone()[0] == 6
    finally:
        conn.close()


def test_seed_command_reads_json_file(db_path, tmp_path, capsys):
    catalog_file = tmp_path / "catalog.json"
    catalog_file.write_text(
        json.dumps(
            [
                {
                    "name": "Crunchyroll",
                    "category": "Anime",
                    "logoUrl": "https://logo.clearbit.com/crunchyroll.com",
                    "description": "Anime streaming.",
                    "basePrice": 7.99,
                    "plans": [{"id": "cr-fan", "name": "Fan", "price": 7.99, "billingCycle": "monthly"}],
                }
            ]
        ),
        encoding="utf-8",
    )

    assert seed_main(["--db", str(db_path), "--file", str(catalog_file)]) == 0

    expected_id = str(uuid.uuid5(CATALOG_NAMESPACE, "Crunchyroll"))
    service = asyncio.run(CatalogService.get_service(expected_id))
    assert service.base_price == "7.99"
    assert service.find_plan("cr-fan").price == 7.99
    assert service.launch_url is None
    assert "Seeded 1 services" in capsys.readouterr().out


def test_seed_command_rejects_invalid_file(db_path, tmp_path, capsys):
    catalog_file = tmp_path / "catalog.json"
    catalog_file.write_text(json.dumps([{"name": "Broken"}]), encoding="utf-8")

    assert seed_main(["--db", str(db_path), "--file", str(catalog_file)]) == 1
    assert "Cannot load catalog" in capsys.readouterr().err
