"""Cross‑cutting concerns: configuration, logging and domain errors."""
