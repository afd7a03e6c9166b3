"""
Application package initializer.

This package contains the API entrypoint and its submodules:
``core`` (configuration, database, sessions, errors, logging),
``schemas`` (pydantic payloads), ``services`` (business logic and
persistence) and ``api`` (HTTP routes).
"""

from .main import app  # noqa: F401
