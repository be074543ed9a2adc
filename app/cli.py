"""
Operator command line: ballot file in, results file out.

Between rounds that cut a new project the cut list is printed and the run
waits for Enter, so the operator can review it before funds are redistributed.

Run: median-allocation output/outputVerifySig.csv -o output/outputResultsFinal.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from core.config import load_config
from core.errors import AllocationError
from data_prep.loader import ballots_from_frame, load_ballot_table
from data_prep.validators import validate_ballot_table
from engine.cutoff import CutNotice
from engine.runner import run_allocation
from report.projection import project_results, write_results
from report.summary import summarize_allocation

logger = logging.getLogger(__name__)


def prompt_continue(notice: CutNotice) -> None:
    print(f"Iteration {notice.round_number}, Projects for cut: {', '.join(notice.cut_ids)}")
    if notice.newly_cut_ids != notice.cut_ids:
        print(f"  newly cut: {', '.join(notice.newly_cut_ids)}")
    input("Press Enter to continue...")


def auto_continue(notice: CutNotice) -> None:
    print(f"Iteration {notice.round_number}, Projects for cut: {', '.join(notice.cut_ids)}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="median-allocation",
        description="Median-weighted fund allocation with quorum, payout floor and iterative cuts.",
    )
    ap.add_argument("input", nargs="?", default=None,
                    help="Verified ballots (.csv or .xlsx). Defaults to the configured input_path.")
    ap.add_argument("-o", "--output", default=None,
                    help="Results file (.csv or .xlsx). Defaults to the configured output_path.")
    ap.add_argument("--config", default=None, help="JSON file with allocation parameters.")
    ap.add_argument("--quorum", type=int, default=None, help="Minimum pledges for eligibility.")
    ap.add_argument("--min-amount", type=float, default=None, help="Payout floor per funded project.")
    ap.add_argument("--total-amount", type=float, default=None, help="Pool to distribute.")
    ap.add_argument("--max-iterations", type=int, default=None, help="Cap on scale/cut rounds.")
    ap.add_argument("-y", "--yes", action="store_true",
                    help="Do not wait for Enter after rounds that cut projects.")
    ap.add_argument("--summary", action="store_true", help="Print the run summary table.")
    ap.add_argument("--log-level", default="INFO",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity.")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(
            args.config,
            quorum=args.quorum,
            min_amount=args.min_amount,
            total_amount=args.total_amount,
            max_iterations=args.max_iterations,
            input_path=args.input,
            output_path=args.output,
        )
    except (AllocationError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        table = load_ballot_table(config.input_path)
    except OSError as exc:
        print(f"error: cannot read {config.input_path}: {exc}", file=sys.stderr)
        return 2

    vr = validate_ballot_table(table)
    if not vr.is_valid:
        print("Ballot validation failed:\n" + vr.summary(), file=sys.stderr)
        return 1
    for warning in vr.warnings:
        logger.warning(warning)

    acknowledge = auto_continue if args.yes else prompt_continue
    try:
        result = run_allocation(ballots_from_frame(table), config, acknowledge=acknowledge)
    except AllocationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    out = write_results(project_results(result.projects), config.output_path)
    print(f"Results saved in {out}")

    if args.summary:
        print(summarize_allocation(result, config).to_dataframe().to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
