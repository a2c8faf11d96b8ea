#!/usr/bin/env python3
"""Run the absence check once, outside the API process.

Reconciles the working day before --date (default: today): employees with
no complete attendance get an auto-applied casual leave.

Usage:
    python scripts/run_absence_check.py                     # as of today
    python scripts/run_absence_check.py --date 2026-03-16   # reconciles Fri 2026-03-13
    python scripts/run_absence_check.py --skip-holidays     # no-op when that day is a holiday
    python scripts/run_absence_check.py --json              # machine-readable summary

Exit codes:
    0 = run completed, no per-employee failures
    1 = one or more employees failed to reconcile
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import date

from quickclock.logging import LOG_FORMAT
from quickclock.reconciliation.service import run_absence_check

logger = logging.getLogger("absence_check")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile missing attendance into leave")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Reference day (YYYY-MM-DD); the previous working day is checked",
    )
    parser.add_argument(
        "--skip-holidays",
        action="store_true",
        default=None,
        help="Skip the run when the checked day is a holiday",
    )
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> int:
    summary = await run_absence_check(args.date, skip_holidays=args.skip_holidays)

    if args.json:
        print(json.dumps(asdict(summary), default=str, indent=2))
    else:
        logger.info(
            "%s: checked=%d complete=%d auto_applied=%d skipped=%d failed=%d%s",
            summary.date, summary.checked, summary.complete, summary.auto_applied,
            summary.skipped, summary.failed, " (holiday)" if summary.holiday else "",
        )
    return 1 if summary.failed else 0


if __name__ == "__main__":
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    sys.exit(asyncio.run(_main(args)))
