"""
Pydantic schema definitions for API payloads.

Each domain (users, subscriptions, catalog, launches) defines its own
models for request and response bodies.  Schemas are separated from
the storage layer so that the wire representation (camelCase JSON)
stays independent of the table layout.
"""
