"""
Service layer.

Each service encapsulates business logic and persistence for one
domain: users, authentication, the marketplace catalog, and
subscriptions with their launch history.  API handlers call into these
modules and never talk to the database directly.
"""
