#!/usr/bin/env python3
"""Resolve position requests against the live providers.

Reads one JSON request per argument (or per line on stdin), resolves each
through a single :class:`PositionResolver` and prints the responses.

Usage
-----
Set environment variables and run::

    export POSITION_GOOGLE_API_KEY="AIza..."
    export POSITION_GEOIP_DATABASE="/var/lib/GeoIP/GeoLite2-City.mmdb"
    python scripts/resolve.py '{"ipAddress": {"ipv4": "8.8.8.8"}}'
    python scripts/resolve.py '{"gpsTimezone": {"latitude": 45.4774536, "longitude": 9.1906932}}'

Options::

    --daily-limit N      Override POSITION_DAILY_LIMIT for this run
    --cache FILE         Load cache entries from FILE and write them back
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyposition import PositionConfig, PositionConfigError, PositionResolver, ResolutionCache  # noqa: E402


def _read_requests(args: argparse.Namespace) -> list[Any]:
    raw = args.requests or [line for line in sys.stdin.read().splitlines() if line.strip()]
    requests: list[Any] = []
    for item in raw:
        try:
            requests.append(json.loads(item))
        except json.JSONDecodeError as exc:
            print(f"Skipping invalid JSON {item!r}: {exc}", file=sys.stderr)
    return requests


def _load_cache(path: Path | None) -> ResolutionCache:
    if path is None or not path.exists():
        return ResolutionCache()
    return ResolutionCache(json.loads(path.read_text(encoding="utf-8")))


async def main() -> int:
    parser = argparse.ArgumentParser(description="Resolve position requests with pyposition")
    parser.add_argument("requests", nargs="*", help="JSON request objects (default: read lines from stdin)")
    parser.add_argument("--daily-limit", type=int, help="Override the daily provider call limit")
    parser.add_argument("--cache", type=Path, help="JSON file to load and persist cache entries")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.daily_limit is not None:
        overrides["daily_limit"] = args.daily_limit

    try:
        config = PositionConfig.from_env(**overrides).validate()
    except PositionConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    cache = _load_cache(args.cache)
    requests = _read_requests(args)

    try:
        async with PositionResolver(config, cache=cache) as resolver:
            for request in requests:
                position = await resolver.get(request)
                print(json.dumps({"request": request, "position": position}, ensure_ascii=False))
            print(f"Billable calls made: {resolver.quota.count}", file=sys.stderr)
    except PositionConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.cache is not None:
        args.cache.write_text(json.dumps(cache.snapshot(), indent=2, ensure_ascii=False), encoding="utf-8")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
