"""Host framework integrations."""

from __future__ import annotations

__all__ = ["pytest_host"]
