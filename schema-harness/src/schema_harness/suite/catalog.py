from __future__ import annotations

import glob
import re
from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence, Union

from schema_harness.suite.types import (
    Filter,
    Suite,
    SuiteFormatError,
    SuitePath,
    parse_test_groups,
)

if TYPE_CHECKING:
    from schema_harness.runner.options import Options

SuiteItem = Union[Suite, SuitePath]
PatternMatcher = Callable[[str, Path], Sequence[str]]

_FOLDER_NAME_RE = re.compile(r"([\w\-_]+/)[\w\-_]+\.json")


def glob_relative(pattern: str, cwd: Path) -> List[str]:
    """Expand `pattern` under `cwd`, returning sorted relative posix paths."""
    matches = glob.glob(pattern, root_dir=str(cwd), recursive=True)
    return sorted(Path(m).as_posix() for m in matches)


def suite_display_name(relative_path: str, *, hide_folder: Optional[str] = None) -> str:
    """Derive `folder/basename` from a matched path.

    Only a single parent folder directly in front of a `name.json` file is
    kept; `hide_folder` drops it when it matches exactly (e.g. "draft4/").
    """
    match = _FOLDER_NAME_RE.search(relative_path)
    folder = match.group(1) if match else ""
    if hide_folder and folder == hide_folder:
        folder = ""
    basename = Path(relative_path).name
    if basename.endswith(".json"):
        basename = basename[: -len(".json")]
    return folder + basename


def _parse_inline_item(raw: Any, *, cwd: Path, where: str) -> SuiteItem:
    if isinstance(raw, (Suite, SuitePath)):
        return raw
    if not isinstance(raw, MappingABC):
        raise SuiteFormatError(f"{where} must be an object")
    name = raw.get("name")
    if not isinstance(name, str):
        raise SuiteFormatError(f"{where}.name must be a string")
    if "test" in raw:
        return Suite(name=name, groups=parse_test_groups(raw["test"], where=f"{where}.test"))
    if "path" in raw:
        path = Path(raw["path"])
        if not path.is_absolute():
            path = cwd / path
        return SuitePath(name=name, path=path)
    raise SuiteFormatError(f"{where} must have either 'test' or 'path'")


def resolve_suites(
    entry: Any,
    options: "Options",
    *,
    matcher: PatternMatcher = glob_relative,
) -> List[SuiteItem]:
    """Resolve an inline suite list or a glob pattern into suite items."""
    cwd = Path(options.cwd) if options.cwd is not None else Path.cwd()

    if isinstance(entry, (list, tuple)):
        return [
            _parse_inline_item(raw, cwd=cwd, where=f"suites[{i}]") for i, raw in enumerate(entry)
        ]

    if not isinstance(entry, str):
        raise SuiteFormatError("suite entry must be a list of suites or a glob pattern")

    items: List[SuiteItem] = []
    for relative in matcher(entry, cwd):
        items.append(
            SuitePath(
                name=suite_display_name(relative, hide_folder=options.hide_folder),
                path=cwd / relative,
            )
        )
    return items


def _named(selection: Any, name: str) -> bool:
    return isinstance(selection, (list, tuple, set, frozenset)) and name in selection


def item_filter(name: str, options: "Options") -> Filter:
    """Per-item filter from name lists; blanket `True` is handled at the top level."""
    return Filter(skip=_named(options.skip, name), only=_named(options.only, name))
