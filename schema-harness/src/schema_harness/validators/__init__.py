"""Ready-made validators for running schema test suites."""

from __future__ import annotations

__all__ = ["jsonschema_adapter"]
