"""
Marketplace catalog of predefined services.

The catalog is read-only through the API.  Rows are written only by
``CatalogService.seed`` (used by the ``seed-catalog`` command).  Plans
and feature lists are stored as JSON text.
"""

import json
import logging
import sqlite3
import uuid
from typing import Iterable, List, Optional

from subscription_tracker.app.core.db import from_db_timestamp, get_connection, to_db_timestamp, utcnow
from subscription_tracker.app.schemas.available_service import (
    AvailableServiceCreate,
    AvailableServiceRead,
    PricingPlan,
)


logger = logging.getLogger(__name__)

# Seed entries without an explicit id get a stable one derived from
# their name, so re-seeding updates rows instead of duplicating them.
CATALOG_NAMESPACE = uuid.UUID("6f1c0d2e-8c55-4d8e-9a59-3f0b7e1f2a10")

_COLUMNS = (
    "id, name, category, logo_url, description, base_price, plans, "
    "is_popular, features, launch_url, created_at"
)


def _row_to_service(row: sqlite3.Row) -> AvailableServiceRead:
    return AvailableServiceRead(
        id=row["id"],
        name=row["name"],
        category=row["category"],
        logo_url=row["logo_url"],
        description=row["description"],
        base_price=row["base_price"],
        plans=[PricingPlan.model_validate(plan) for plan in json.loads(row["plans"])],
        is_popular=bool(row["is_popular"]),
        features=json.loads(row["features"]),
        launch_url=row["launch_url"],
        created_at=from_db_timestamp(row["created_at"]),
    )


class CatalogService:
    """Read access to available services plus bulk seeding."""

    @classmethod
    async def list_services(cls) -> List[AvailableServiceRead]:
        """Return every catalog entry, popular services first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM available_services ORDER BY is_popular DESC, name"
            ).fetchall()
            return [_row_to_service(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_service(cls, service_id: str) -> Optional[AvailableServiceRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM available_services WHERE id = ?",
                (service_id,),
            ).fetchone()
            return _row_to_service(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def seed(cls, services: Iterable[AvailableServiceCreate]) -> int:
        """Insert or update catalog entries and return how many were written.

        Existing rows keep their ``created_at``.
        """
        now = to_db_timestamp(utcnow())
        count = 0
        conn = get_connection()
        try:
            for item in services:
                service_id = item.id or str(uuid.uuid5(CATALOG_NAMESPACE, item.name))
                plans = json.dumps([plan.model_dump(by_alias=True) for plan in item.plans])
                conn.execute(
                    """
                    INSERT INTO available_services (id, name, category, logo_url, description, base_price,
                                                    plans, is_popular, features, launch_url, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        category = excluded.category,
                        logo_url = excluded.logo_url,
                        description = excluded.description,
                        base_price = excluded.base_price,
                        plans = excluded.plans,
                        is_popular = excluded.is_popular,
                        features = excluded.features,
                        launch_url = excluded.launch_url
                    """,
                    (
                        service_id,
                        item.name,
                        item.category,
                        item.logo_url,
                        item.description,
                        item.base_price,
                        plans,
                        int(item.is_popular),
                        json.dumps(item.features),
                        item.launch_url,
                        now,
                    ),
                )
                count += 1
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.info("Seeded %d catalog entries", count)
        return count
