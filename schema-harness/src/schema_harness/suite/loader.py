from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Tuple

import yaml

from schema_harness.suite.types import Suite, SuitePath, TestGroup, parse_test_groups

ContentLoader = Callable[[Path], Any]


def load_content(path: Path) -> Any:
    """Load a JSON/YAML file.

    Suite and data files may hold any top-level value, so no shape check is
    done here.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    if path.suffix.lower() == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    raise ValueError(f"Unsupported content file extension: {path}")


def load_suite_groups(
    item: Suite | SuitePath,
    *,
    loader: ContentLoader = load_content,
) -> Tuple[Tuple[TestGroup, ...], Path | None]:
    """Return the test groups of a suite and its directory context.

    Inline suites have no directory context; data files in them resolve
    against the process working directory.
    """
    if isinstance(item, Suite):
        return item.groups, None
    groups = parse_test_groups(loader(item.path), where=str(item.path))
    return groups, item.path.parent
