"""
Client side of the Subscription Tracker.

``api_client`` talks to the HTTP API and caches reads; ``dashboard``,
``filters`` and ``marketplace`` are pure computations over the records
it returns; ``cli`` is the terminal dashboard built on top of them.
"""
