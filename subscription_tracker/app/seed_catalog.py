#!/usr/bin/env python3
"""
Seed the marketplace catalog (``available_services``) in the SQLite database.

Entries are upserted by id, so running the command twice is harmless.
Without ``--file`` the built-in catalog is used.

Usage:
    seed-catalog
    seed-catalog --db ./subscriptions.db --file ./catalog.json

The JSON file holds a list of services in the API's camelCase shape
(``name``, ``category``, ``logoUrl``, ``description``, ``basePrice``,
``plans``, optional ``id``, ``isPopular``, ``features``, ``launchUrl``).
"""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from .core.config import settings
from .core.db import get_database_path, init_db
from .core.logging_config import setup_logging
from .schemas.available_service import AvailableServiceCreate
from .services.catalog_service import CatalogService
from .services.default_catalog import DEFAULT_CATALOG


_CATALOG_ADAPTER = TypeAdapter(List[AvailableServiceCreate])


def load_catalog(path: Optional[str]) -> List[AvailableServiceCreate]:
    """Read and validate catalog entries from ``path`` or the built-in list."""
    if path is None:
        return _CATALOG_ADAPTER.validate_python(DEFAULT_CATALOG)
    with open(path, "r", encoding="utf-8") as f:
        return _CATALOG_ADAPTER.validate_python(json.load(f))


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the marketplace catalog (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file (default: DATABASE_URL setting)")
    ap.add_argument("--file", help="JSON file with catalog entries (default: built-in catalog)")
    args = ap.parse_args(argv)

    setup_logging(settings.log_level, settings.log_file or None)
    if args.db:
        settings.database_url = os.path.abspath(args.db)

    try:
        services = load_catalog(args.file)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        print(f"[!] Cannot load catalog: {exc}", file=sys.stderr)
        return 1

    init_db()
    count = asyncio.run(CatalogService.seed(services))
    print(f"[+] Seeded {count} services into {get_database_path()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
