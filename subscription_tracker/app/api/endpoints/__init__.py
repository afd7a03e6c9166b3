"""
Endpoint subpackage.

Each module in this package defines an APIRouter for one domain
(auth, subscriptions, marketplace catalog, users).  The routers are
aggregated in ``api/router.py`` and mounted by the application.
"""
