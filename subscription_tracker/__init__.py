"""
Top-level package for the Subscription Tracker.

``subscription_tracker.app`` is the HTTP API (server side) and
``subscription_tracker.client`` is the API client, the dashboard and
marketplace computations and the terminal dashboard built on them.
Importing this package does not create the web application.
"""

__all__ = []
