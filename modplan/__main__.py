"""
modplan — entry point.

Usage:
    python -m modplan search job.json [--out arrangements.json]
    python -m modplan search job.json --optimal --by-perimeter
    python -m modplan layout job.json --index 0 --policy credit_back
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from modplan.catalog import InvalidCombinationError
from modplan.pipeline.allocator import ContestPolicy
from modplan.pipeline.arrangement.strategies import STRATEGIES
from modplan.pipeline.runner import JobError, load_job, run_layout, run_search


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="modplan", description="Module packing and space allocation")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("search", help="List every arrangement of the job's combination")
    s.add_argument("job", help="Path to job.json")
    s.add_argument("--out", default=None, help="Output file (default: stdout)")
    s.add_argument("--strategy", choices=sorted(STRATEGIES), default="adjacency")
    s.add_argument("--workers", type=int, default=1, help="Processes for the search")
    s.add_argument("--optimal", action="store_true", help="Keep only max-contact, min-perimeter results")
    s.add_argument("--by-perimeter", action="store_true", help="One arrangement per silhouette")

    lay = sub.add_parser("layout", help="Grid and allocate one arrangement")
    lay.add_argument("job", help="Path to job.json")
    lay.add_argument("--out", default=None, help="Output file (default: stdout)")
    lay.add_argument("--index", type=int, default=0, help="Arrangement to lay out")
    lay.add_argument("--strategy", choices=sorted(STRATEGIES), default="adjacency")
    lay.add_argument("--policy", choices=[p.value for p in ContestPolicy],
                     default=ContestPolicy.STRICT.value)
    lay.add_argument("--fill-empty", action="store_true", help="Assign cells no space covers")
    lay.add_argument("--all", action="store_true",
                     help="Index into all arrangements, not only the optimal ones")

    return p


def _write(payload: dict, out: str | None) -> None:
    text = json.dumps(payload, indent=2)
    if out is None:
        print(text)
    else:
        Path(out).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {out}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        job = load_job(Path(args.job))
        if args.cmd == "search":
            payload = run_search(
                job, strategy=args.strategy, workers=args.workers,
                optimal=args.optimal, by_perimeter=args.by_perimeter,
            )
        else:
            payload = run_layout(
                job, index=args.index, strategy=args.strategy,
                policy=args.policy, fill_empty=args.fill_empty,
                optimal=not args.all,
            )
    except (JobError, InvalidCombinationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _write(payload, args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
