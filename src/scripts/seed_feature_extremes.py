#!/usr/bin/env python3
"""Load feature extremes from a JSON file into the local database."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import django


def main(argv: list[str] | None = None) -> int:
    """Store every feature of the seed file; the path defaults to seeds/feature_extremes.json."""
    args = sys.argv[1:] if argv is None else argv
    project_root = Path(__file__).resolve().parents[1]
    seed_path = Path(args[0]) if args else project_root / "seeds" / "feature_extremes.json"

    if not seed_path.exists():
        print(f"Seed file not found at {seed_path}", file=sys.stderr)
        return 1

    try:
        payload = json.loads(seed_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"Seed file {seed_path} is not valid JSON: {exc}", file=sys.stderr)
        return 1

    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "featuremix.settings")

    try:
        django.setup()
    except ModuleNotFoundError as exc:
        missing = exc.name or "unknown dependency"
        print(
            "Django could not start because a dependency is missing. "
            f"Install the project (pip install -e .). Missing module: {missing}",
            file=sys.stderr,
        )
        return 1

    from playlists.services.extremes import store_feature_extremes

    if not isinstance(payload, dict):
        print(f"Seed file {seed_path} must hold a JSON object keyed by feature.", file=sys.stderr)
        return 1

    try:
        count = store_feature_extremes(payload)
    except ValueError as exc:
        print(f"Failed to seed feature extremes: {exc}", file=sys.stderr)
        return 1

    print(f"Loaded {count} feature(s) from {seed_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
