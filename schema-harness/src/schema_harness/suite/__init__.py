"""Suite definitions: types, content loading, discovery and schema expansion."""

from __future__ import annotations

__all__ = ["catalog", "expand", "loader", "types"]
