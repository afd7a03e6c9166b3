"""Subscription Tracker API client.

A thin wrapper around the REST API built on ``requests``.  The session
cookie issued by ``/api/auth/login`` is kept by the underlying
:class:`requests.Session`, so a single client instance represents one
signed-in user.

Every public method returns a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is ``None`` (or an empty
list for collection reads) and ``error`` is a dictionary with keys
``status_code`` and ``message``.

GET responses are cached by path and query string.  Mutations drop the
cached entries they make stale:

* creating, updating, deleting or subscribing invalidates every
  ``/api/subscriptions`` query;
* launching a service additionally invalidates ``/api/users/launch-stats``;
* logging in or out clears the whole cache.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]

SUBSCRIPTIONS_PATH = "/api/subscriptions"
LAUNCH_STATS_PATH = "/api/users/launch-stats"
SERVICES_PATH = "/api/available-services"

DEFAULT_TIMEOUT = 15


class QueryCache:
    """In-memory cache of GET responses keyed by path and query string."""

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}

    @staticmethod
    def key(path: str, params: Optional[Dict[str, Any]] = None) -> str:
        if not params:
            return path
        return f"{path}?{urlencode(sorted(params.items()))}"

    def get(self, key: str) -> Tuple[bool, Any]:
        if key in self._entries:
            return True, self._entries[key]
        return False, None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, prefix: str) -> int:
        """Drop every entry whose key starts with ``prefix``."""
        stale = [key for key in self._entries if key.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class SubscriptionTrackerClient:
    """Client for the subscription tracker API.

    Args:
        base_url: Root URL of the server, e.g. ``http://localhost:5000``.
        session: Optional requests-compatible session.  Tests pass a
            FastAPI ``TestClient`` here.
        timeout: Per-request timeout in seconds.  Requests are never
            retried.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.cache = QueryCache()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and return ``(data, error)``."""
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if response.status_code >= 400:
            try:
                body = response.json()
                message = body.get("message") or body.get("detail") or str(body)
            except ValueError:
                message = response.text
            if not message:
                message = f"HTTP {response.status_code}"
            # 401 is the normal answer for an anonymous /me.
            log = logger.info if response.status_code == 401 else logger.error
            log("API request failed (%s): %s", response.status_code, message)
            return None, {"status_code": response.status_code, "message": message}

        if response.content:
            return response.json(), None
        return None, None

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[Optional[Any], Optional[Error]]:
        key = self.cache.key(path, params)
        hit, value = self.cache.get(key)
        if hit:
            return value, None
        data, error = self._request("GET", path, params=params)
        if error is None:
            self.cache.set(key, data)
        return data, error

    def _invalidate_subscriptions(self) -> None:
        self.cache.invalidate(SUBSCRIPTIONS_PATH)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def login(self, email: str, name: Optional[str] = None) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload: Dict[str, Any] = {"email": email}
        if name:
            payload["name"] = name
        data, error = self._request("POST", "/api/auth/login", json_body=payload)
        if error:
            return None, error
        self.cache.clear()
        return data["user"], None

    def logout(self) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("POST", "/api/auth/logout")
        self.cache.clear()
        return error is None, error

    def me(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Return the signed-in user.  Not cached: it reflects the cookie."""
        data, error = self._request("GET", "/api/auth/me")
        if error:
            return None, error
        return data["user"], None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def list_subscriptions(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._get(SUBSCRIPTIONS_PATH)
        if error:
            return [], error
        return data or [], None

    def list_expiring(self, days: int = 30) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._get(f"{SUBSCRIPTIONS_PATH}/expiring", {"days": days})
        if error:
            return [], error
        return data or [], None

    def get_subscription(self, subscription_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._get(f"{SUBSCRIPTIONS_PATH}/{subscription_id}")

    def create_subscription(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("POST", SUBSCRIPTIONS_PATH, json_body=payload)
        if error is None:
            self._invalidate_subscriptions()
        return data, error

    def update_subscription(
        self, subscription_id: str, changes: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("PATCH", f"{SUBSCRIPTIONS_PATH}/{subscription_id}", json_body=changes)
        if error is None:
            self._invalidate_subscriptions()
        return data, error

    def delete_subscription(self, subscription_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"{SUBSCRIPTIONS_PATH}/{subscription_id}")
        if error:
            return False, error
        self._invalidate_subscriptions()
        return True, None

    def subscribe(self, service_id: str, plan_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request(
            "POST",
            f"{SUBSCRIPTIONS_PATH}/subscribe",
            json_body={"serviceId": service_id, "planId": plan_id},
        )
        if error is None:
            self._invalidate_subscriptions()
        return data, error

    def launch(self, subscription_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("POST", f"{SUBSCRIPTIONS_PATH}/{subscription_id}/launch")
        if error:
            return None, error
        # lastUsed changed and a launch was recorded.
        self._invalidate_subscriptions()
        self.cache.invalidate(LAUNCH_STATS_PATH)
        return data["launch"], None

    def launch_stats(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._get(LAUNCH_STATS_PATH)
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Marketplace catalog
    # ------------------------------------------------------------------
    def list_services(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._get(SERVICES_PATH)
        if error:
            return [], error
        return data or [], None

    def get_service(self, service_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._get(f"{SERVICES_PATH}/{service_id}")
