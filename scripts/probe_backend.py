#!/usr/bin/env python3
"""Live backend probe for pyexposure.

Fetches the exposure configuration, downloads the key archives a fresh
install would backfill and, optionally, claims a one-time code. Nothing
is uploaded.

Configuration comes from ``EXPOSURE_*`` environment variables::

    export EXPOSURE_RETRIEVE_URL="https://retrieval.example.org"
    export EXPOSURE_SUBMIT_URL="https://submission.example.org"
    export EXPOSURE_HMAC_KEY="<hex>"
    python scripts/probe_backend.py --days 2
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyexposure import BackendService, ExposureConfig, ExposureError  # noqa: E402
from pyexposure._dates import utcnow  # noqa: E402
from pyexposure.backfill import BackfillCursor  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Probe a diagnosis-key backend")
    parser.add_argument(
        "--days",
        type=int,
        default=1,
        help="Download archives covering this many past days (default: 1).",
    )
    parser.add_argument(
        "--claim",
        metavar="CODE",
        default=None,
        help="Also claim this one-time code. Consumes the code on the server.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    config = ExposureConfig.from_env()
    now = utcnow()
    cursor = BackfillCursor.from_config(config, now=now, last_checked=now - timedelta(days=args.days))
    failures = 0

    async with BackendService(config) as backend:
        try:
            configuration = await backend.get_exposure_configuration()
            print(f"configuration: {configuration.to_wire()}")
        except ExposureError as exc:
            print(f"configuration: FAIL {exc}")
            failures += 1

        for request in cursor:
            try:
                path = await backend.retrieve_diagnosis_keys(request.period)
                print(f"period {request.period}: {Path(path).stat().st_size} bytes -> {path}")
            except ExposureError as exc:
                print(f"period {request.period}: FAIL {exc}")
                failures += 1

        if args.claim:
            try:
                key_set = await backend.claim_one_time_code(args.claim)
                print(f"claim: OK server key {key_set.server_public_key}")
            except ExposureError as exc:
                print(f"claim: FAIL {exc}")
                failures += 1

    print(f"Summary: {failures} failure(s)")
    return 1 if failures else 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
