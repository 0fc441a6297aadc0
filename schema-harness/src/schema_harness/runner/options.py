from __future__ import annotations

import asyncio
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Union

from schema_harness.runner.outcome import DEFAULT_ASSERT, AssertLike
from schema_harness.suite.loader import ContentLoader, load_content
from schema_harness.suite.types import TestResult

DEFAULT_DESCRIPTION = "JSON schema tests"

ASYNC_VALID_MODES = ("data",)

# camelCase spellings accepted by `Options.from_mapping`.
_KEY_ALIASES = {
    "async": "async_mode",
    "asyncValid": "async_valid",
    "afterEach": "after_each",
    "afterError": "after_error",
    "hideFolder": "hide_folder",
    "assert": "assert_",
    "Promise": "gather",
}

Hook = Callable[[TestResult], Any]
Selection = Union[bool, Sequence[str], None]


class ConfigurationError(ValueError):
    pass


def _check_selection(value: Any, *, key: str) -> None:
    if value is None or isinstance(value, bool):
        return
    if isinstance(value, (list, tuple, set, frozenset)) and all(isinstance(v, str) for v in value):
        return
    raise ConfigurationError(f"{key} must be a boolean or a list of names")


@dataclass(frozen=True)
class Options:
    suites: Mapping[str, Any] = field(default_factory=dict)
    description: str = DEFAULT_DESCRIPTION
    async_mode: bool = False
    async_valid: Optional[str] = None
    after_each: Optional[Hook] = None
    after_error: Optional[Hook] = None
    log: bool = True
    only: Selection = None
    skip: Selection = None
    cwd: Optional[Path] = None
    hide_folder: Optional[str] = None
    timeout: Optional[float] = None
    assert_: AssertLike = DEFAULT_ASSERT
    gather: Optional[Callable[..., Awaitable[Any]]] = asyncio.gather
    loader: ContentLoader = load_content

    def __post_init__(self) -> None:
        if not isinstance(self.suites, MappingABC):
            raise ConfigurationError("suites must be a mapping of suite group name to suites")
        if self.async_valid is not None and self.async_valid not in ASYNC_VALID_MODES:
            raise ConfigurationError(
                f"async_valid must be one of {list(ASYNC_VALID_MODES)}, got {self.async_valid!r}"
            )
        _check_selection(self.only, key="only")
        _check_selection(self.skip, key="skip")
        for hook_name in ("after_each", "after_error"):
            hook = getattr(self, hook_name)
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"{hook_name} must be callable")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Options":
        """Build options from a plain mapping (snake_case or camelCase keys)."""
        kwargs = _normalize_keys(raw)
        if kwargs.get("cwd") is not None:
            kwargs["cwd"] = Path(kwargs["cwd"])
        return cls(**kwargs)


def _normalize_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(raw, MappingABC):
        raise ConfigurationError("options must be a mapping")

    known = {f.name for f in fields(Options)}
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        name = _KEY_ALIASES.get(str(key), str(key))
        if name not in known:
            raise ConfigurationError(f"unsupported option: {key!r}")
        if name in out:
            raise ConfigurationError(f"option given twice: {key!r}")
        out[name] = value
    return out


def load_options(path: Path, **overrides: Any) -> Options:
    """Load static options from a YAML/JSON file.

    Callables (hooks, assertion, loader) cannot live in the file and are
    passed as `overrides`. A relative `cwd` resolves against the file's
    directory; without one the file's directory is used.
    """
    path = Path(path)
    raw = load_content(path)
    if not isinstance(raw, MappingABC):
        raise ConfigurationError(f"options file must hold an object: {path}")

    merged = _normalize_keys(raw)
    merged.update(_normalize_keys(overrides))

    cwd = merged.get("cwd")
    if cwd is None:
        merged["cwd"] = path.parent
    elif not Path(cwd).is_absolute():
        merged["cwd"] = (path.parent / cwd).resolve()
    return Options.from_mapping(merged)
