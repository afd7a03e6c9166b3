"""
HTTP API package.

``router`` (in ``router.py``) includes every endpoint module and is
mounted under ``/api`` by ``main.create_app``.
"""
