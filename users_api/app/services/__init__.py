"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
storage only through a repository, so the in‑memory store used here
can be swapped for a persistent one without changing API handlers.
"""
