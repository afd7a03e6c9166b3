"""
Business logic for subscriptions and service launches.

Every subscription and launch row belongs to exactly one user, keyed by
email.  ``SubscriptionRepository`` is bound to an owner email at
construction and adds ``user_email = ?`` to every statement it runs, so
a handler can only ever reach its caller's rows: another user's id is
indistinguishable from a missing one and yields ``NotFoundError``.

``SubscriptionService.subscribe`` implements the marketplace one-click
subscription on top of the repository and the catalog.
"""

import calendar
import logging
import sqlite3
import uuid
from datetime import date, datetime, timedelta
from typing import List, Optional

from subscription_tracker.app.core.db import from_db_timestamp, get_connection, to_db_timestamp, utcnow
from subscription_tracker.app.core.errors import NotFoundError
from subscription_tracker.app.schemas.launch import LaunchStat, ServiceLaunchRead
from subscription_tracker.app.schemas.subscription import SubscriptionCreate, SubscriptionRead
from subscription_tracker.app.services.catalog_service import CatalogService


logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, user_email, name, category, cost, billing_cycle, renewal_date, "
    "expiration_date, status, logo_url, description, last_used"
)

# Attribute names accepted by ``update``; they match the column names.
UPDATABLE_FIELDS = {
    "name",
    "category",
    "cost",
    "billing_cycle",
    "renewal_date",
    "expiration_date",
    "status",
    "logo_url",
    "description",
    "last_used",
}
TIMESTAMP_FIELDS = {"renewal_date", "expiration_date", "last_used"}

SUBSCRIPTION_NOT_FOUND = "Subscription not found"


def _row_to_subscription(row: sqlite3.Row) -> SubscriptionRead:
    return SubscriptionRead(
        id=row["id"],
        owner_email=row["user_email"],
        name=row["name"],
        category=row["category"],
        cost=row["cost"],
        billing_cycle=row["billing_cycle"],
        renewal_date=from_db_timestamp(row["renewal_date"]),
        expiration_date=from_db_timestamp(row["expiration_date"]),
        status=row["status"],
        logo_url=row["logo_url"],
        description=row["description"],
        last_used=from_db_timestamp(row["last_used"]),
    )


def add_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` by whole months, clamping to the end of shorter months."""
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def next_billing_date(moment: datetime, billing_cycle: str) -> datetime:
    """One billing period after ``moment``: a year for annual plans, else a month."""
    if billing_cycle == "annual":
        return add_months(moment, 12)
    return add_months(moment, 1)


class SubscriptionRepository:
    """Subscription and launch persistence scoped to one owner."""

    def __init__(self, owner_email: str) -> None:
        self.owner_email = owner_email

    def _fetch(self, conn: sqlite3.Connection, subscription_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(
            f"SELECT {_COLUMNS} FROM subscriptions WHERE id = ? AND user_email = ?",
            (subscription_id, self.owner_email),
        ).fetchone()

    async def get(self, subscription_id: str) -> SubscriptionRead:
        """Return one subscription or raise ``NotFoundError``."""
        conn = get_connection()
        try:
            row = self._fetch(conn, subscription_id)
            if not row:
                raise NotFoundError(SUBSCRIPTION_NOT_FOUND)
            return _row_to_subscription(row)
        finally:
            conn.close()

    async def list(self) -> List[SubscriptionRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM subscriptions WHERE user_email = ? ORDER BY name COLLATE NOCASE, id",
                (self.owner_email,),
            ).fetchall()
            return [_row_to_subscription(row) for row in rows]
        finally:
            conn.close()

    async def list_expiring(self, days_ahead: int, today: Optional[date] = None) -> List[SubscriptionRead]:
        """Subscriptions whose expiration day lies in ``[today, today + days_ahead]``.

        Days are UTC calendar days.  Rows without an expiration date or
        with one before today are never returned.
        """
        if days_ahead < 0:
            raise ValueError("days_ahead must be non-negative")
        today = today or utcnow().date()
        window_start = to_db_timestamp(today)
        try:
            window_end = to_db_timestamp(today + timedelta(days=days_ahead + 1))
        except OverflowError:
            # Past the last representable day: every future expiration matches.
            window_end = None
        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM subscriptions
                WHERE user_email = ?
                  AND expiration_date IS NOT NULL
                  AND expiration_date >= ?
                  AND (? IS NULL OR expiration_date < ?)
                ORDER BY expiration_date
                """,
                (self.owner_email, window_start, window_end, window_end),
            ).fetchall()
            return [_row_to_subscription(row) for row in rows]
        finally:
            conn.close()

    async def create(self, data: SubscriptionCreate, now: Optional[datetime] = None) -> SubscriptionRead:
        """Insert a subscription owned by this repository's user.

        ``last_used`` starts at the creation time.
        """
        subscription_id = str(uuid.uuid4())
        now = now or utcnow()
        conn = get_connection()
        try:
            conn.execute(
                f"""
                INSERT INTO subscriptions ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    subscription_id,
                    self.owner_email,
                    data.name,
                    data.category,
                    data.cost,
                    data.billing_cycle,
                    to_db_timestamp(data.renewal_date),
                    to_db_timestamp(data.expiration_date) if data.expiration_date else None,
                    data.status,
                    data.logo_url,
                    data.description,
                    to_db_timestamp(now),
                ),
            )
            conn.commit()
            row = self._fetch(conn, subscription_id)
        finally:
            conn.close()
        logger.info("User %s created subscription %s (%s)", self.owner_email, subscription_id, data.name)
        return _row_to_subscription(row)

    async def update(self, subscription_id: str, changes: dict) -> SubscriptionRead:
        """Apply a partial update and return the stored result.

        Unknown keys are ignored.  Concurrent updates are last write
        wins.  Raises ``NotFoundError`` if the subscription is absent or
        owned by someone else.
        """
        fields = []
        values = []
        for key, value in changes.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if key in TIMESTAMP_FIELDS and value is not None:
                value = to_db_timestamp(value)
            fields.append(f"{key} = ?")
            values.append(value)
        conn = get_connection()
        try:
            if fields:
                values.extend([subscription_id, self.owner_email])
                conn.execute(
                    f"UPDATE subscriptions SET {', '.join(fields)} WHERE id = ? AND user_email = ?",
                    tuple(values),
                )
                conn.commit()
            row = self._fetch(conn, subscription_id)
            if not row:
                raise NotFoundError(SUBSCRIPTION_NOT_FOUND)
            return _row_to_subscription(row)
        finally:
            conn.close()

    async def delete(self, subscription_id: str) -> None:
        """Delete a subscription or raise ``NotFoundError``.

        Launch history for the subscription is kept.
        """
        conn = get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM subscriptions WHERE id = ? AND user_email = ?",
                (subscription_id, self.owner_email),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError(SUBSCRIPTION_NOT_FOUND)
        finally:
            conn.close()
        logger.info("User %s deleted subscription %s", self.owner_email, subscription_id)

    async def track_launch(self, subscription_id: str, now: Optional[datetime] = None) -> ServiceLaunchRead:
        """Record a launch of an owned subscription and bump its ``last_used``."""
        now = now or utcnow()
        launched_at = to_db_timestamp(now)
        launch_id = str(uuid.uuid4())
        conn = get_connection()
        try:
            row = self._fetch(conn, subscription_id)
            if not row:
                raise NotFoundError(SUBSCRIPTION_NOT_FOUND)
            conn.execute(
                """
                INSERT INTO service_launches (id, subscription_id, user_email, service_name, launched_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (launch_id, subscription_id, self.owner_email, row["name"], launched_at),
            )
            conn.execute(
                "UPDATE subscriptions SET last_used = ? WHERE id = ? AND user_email = ?",
                (launched_at, subscription_id, self.owner_email),
            )
            conn.commit()
            return ServiceLaunchRead(
                id=launch_id,
                subscription_id=subscription_id,
                owner_email=self.owner_email,
                service_name=row["name"],
                launched_at=from_db_timestamp(launched_at),
            )
        finally:
            conn.close()

    async def launch_stats(self) -> List[LaunchStat]:
        """Launch count and latest launch per service name, most recent first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT service_name, COUNT(*) AS launch_count, MAX(launched_at) AS last_launched
                FROM service_launches
                WHERE user_email = ?
                GROUP BY service_name
                ORDER BY last_launched DESC
                """,
                (self.owner_email,),
            ).fetchall()
            return [
                LaunchStat(
                    service_name=row["service_name"],
                    launch_count=row["launch_count"],
                    last_launched=from_db_timestamp(row["last_launched"]),
                )
                for row in rows
            ]
        finally:
            conn.close()


class SubscriptionService:
    """Operations that combine the catalog with a user's subscriptions."""

    @classmethod
    async def subscribe(
        cls,
        repository: SubscriptionRepository,
        service_id: str,
        plan_id: str,
        now: Optional[datetime] = None,
    ) -> SubscriptionRead:
        """Create a subscription from a catalog service and plan.

        Renewal and expiration are one billing period from ``now``.
        Raises ``NotFoundError`` if the service or plan does not exist.
        """
        service = await CatalogService.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        plan = service.find_plan(plan_id)
        if plan is None:
            raise NotFoundError("Plan not found")

        now = now or utcnow()
        renews = next_billing_date(now, plan.billing_cycle)
        data = SubscriptionCreate(
            name=f"{service.name} - {plan.name}",
            category=service.category,
            cost=plan.price,
            billing_cycle=plan.billing_cycle,
            renewal_date=renews,
            expiration_date=renews,
            status="active",
            logo_url=service.logo_url,
            description=service.description,
        )
        return await repository.create(data, now=now)
