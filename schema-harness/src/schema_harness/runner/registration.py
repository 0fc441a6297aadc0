"""Registration primitives consumed from the host test framework.

A host exposes a grouping primitive (`describe`) and a leaf-test primitive
(`it`). Each is callable as `primitive(label, fn, **kwargs)` and exposes
`.skip` and `.only` variants with the same signature.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

NORMAL = "normal"
SKIP = "skip"
ONLY = "only"

MODES = (NORMAL, SKIP, ONLY)


@runtime_checkable
class RegistrationPrimitive(Protocol):
    skip: Any
    only: Any

    def __call__(self, label: str, fn: Callable[..., Any], **kwargs: Any) -> Any: ...


class Primitive:
    """Wrap `register(label, fn, *, mode, **kwargs)` into a describe/it-style primitive."""

    def __init__(self, register: Callable[..., Any], mode: str = NORMAL) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown registration mode: {mode!r}")
        self._register = register
        self.mode = mode

    def __call__(self, label: str, fn: Callable[..., Any], **kwargs: Any) -> Any:
        return self._register(label, fn, mode=self.mode, **kwargs)

    @property
    def skip(self) -> "Primitive":
        return Primitive(self._register, SKIP)

    @property
    def only(self) -> "Primitive":
        return Primitive(self._register, ONLY)

    def __repr__(self) -> str:
        name = getattr(self._register, "__name__", self._register)
        return f"Primitive({name!r}, mode={self.mode!r})"
