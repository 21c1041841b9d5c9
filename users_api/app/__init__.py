"""
Application package initializer.

The project is organised into layers that build on each other:
``schemas`` holds the entity and value types, ``repositories`` the
persistence contract and its in‑memory implementation, ``services``
the business rules, and ``api`` the versioned HTTP routes.  Shared
concerns (configuration, logging, domain errors) live in ``core``.
"""

from .main import app  # noqa: F401
