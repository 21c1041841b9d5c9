"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration.  In a production deployment you
should override these via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from ..repositories import InMemoryUserRepository, UserRepository

SUPPORTED_STORAGE_BACKENDS = ("memory",)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Users API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(
        default_factory=lambda: os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Optional path of a log file.  When unset, logs go to the console only.
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api/v1"))

    # Only the in‑memory backend ships with this project.  A persistent
    # backend would register its own name here and in ``build_repository``.
    storage_backend: str = field(
        default_factory=lambda: os.getenv("STORAGE_BACKEND", "memory").lower()
    )

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    def validate(self) -> "Settings":
        """Check value ranges and return ``self``.

        Raises
        ------
        ValueError
            If the port is outside 1‑65535 or the storage backend is
            not supported.
        """
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Invalid PORT: {self.port}. Must be a number between 1-65535")
        if self.storage_backend not in SUPPORTED_STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid STORAGE_BACKEND: {self.storage_backend}. "
                f"Must be one of: {', '.join(SUPPORTED_STORAGE_BACKENDS)}"
            )
        return self


def build_repository(config: "Settings") -> UserRepository:
    """Return a fresh repository for the configured storage backend."""
    config.validate()
    return InMemoryUserRepository()


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
