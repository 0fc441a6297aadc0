"""Test registration and execution against schema validators."""

from __future__ import annotations

__all__ = ["engine", "filters", "options", "orchestrator", "outcome", "registration"]
