from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from schema_harness.runner.options import Options
from schema_harness.suite.catalog import item_filter, resolve_suites
from schema_harness.suite.loader import load_suite_groups


def _split_names(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None:
        return None
    names = [n.strip() for n in raw.split(",") if n.strip()]
    return names or None


def _status(name: str, options: Options) -> str:
    flt = item_filter(name, options)
    if flt.only:
        return "only"
    if flt.skip:
        return "skip"
    return "run"


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="List schema test suites matched by a glob pattern (dry-run)."
    )
    parser.add_argument(
        "--pattern", type=str, required=True, help="Glob pattern, e.g. 'tests/*.json'"
    )
    parser.add_argument(
        "--cwd",
        type=Path,
        default=None,
        help="Base directory for the pattern (default: current directory)",
    )
    parser.add_argument(
        "--hide_folder",
        type=str,
        default=None,
        help="Folder prefix to drop from suite names (e.g. 'draft4/')",
    )
    parser.add_argument("--only", type=str, default=None, help="Comma-separated suite names")
    parser.add_argument("--skip", type=str, default=None, help="Comma-separated suite names")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Load each suite and check its format",
    )
    args = parser.parse_args(argv)

    options = Options(
        cwd=args.cwd,
        hide_folder=args.hide_folder,
        only=_split_names(args.only),
        skip=_split_names(args.skip),
    )
    items = resolve_suites(args.pattern, options)
    if not items:
        raise SystemExit(f"no suites matched {args.pattern!r} under {args.cwd or Path.cwd()}")

    print(f"Discovered {len(items)} suite(s) for {args.pattern}")
    problems: List[str] = []
    for item in items:
        line = f"- {item.name}\t{_status(item.name, options)}\t{item.path}"
        if args.validate:
            try:
                groups, _ = load_suite_groups(item, loader=options.loader)
            except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
                problems.append(f"{item.path}: {e}")
                line += "\tINVALID"
            else:
                n_tests = sum(len(g.tests) for g in groups)
                line += f"\t{len(groups)} group(s), {n_tests} test(s)"
        print(line)

    if problems:
        raise SystemExit("invalid suite file(s):\n" + "\n".join(problems))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
