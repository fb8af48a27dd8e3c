"""Command line entry point: ``gbptax YEAR GROSS_INCOME``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence, TextIO

from gbptax.backend.config.year_config import (
    ConfigurationError,
    available_years,
    load_schedule,
    load_year_configuration,
)
from gbptax.backend.services.calculation_service import build_calculation_payload
from gbptax.backend.services.calculators import Gbp, GbpParseError, TaxBreakdown, format_percentage
from gbptax.backend.version import get_project_version

_LOGGER = logging.getLogger(__name__)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gbptax",
        description="Calculate income tax due for a gross salary in a given tax year.",
    )
    parser.add_argument(
        "year",
        nargs="?",
        type=int,
        help="Tax year to use, e.g. 2018 for 2018-2019",
    )
    parser.add_argument(
        "gross_income",
        nargs="?",
        help="Gross annual income, e.g. 43500 or '£43,500.00'",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the breakdown as JSON instead of text",
    )
    parser.add_argument(
        "--list-years",
        action="store_true",
        help="List the tax years that can be calculated and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_project_version()}",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def render_breakdown(label: str, breakdown: TaxBreakdown) -> str:
    """Return the text report printed for a calculation."""

    lines = [
        f"Tax Year: {label}",
        f"Gross Salary: {breakdown.gross_income}",
        "",
        f"Tax Free Allowance: {breakdown.tax_free_allowance}",
        f"Taxable Income: {breakdown.taxable_income}",
        "",
    ]
    for result in breakdown.bands:
        lines.append(
            f"{result.band.name}: {result.affected_income} @ "
            f"{format_percentage(result.band.rate)} = {result.tax}"
        )
    lines.extend(
        [
            "",
            f"Total Tax Due: {breakdown.total_tax}",
            f"Net Income: {breakdown.net_income}",
        ]
    )
    return "\n".join(lines)


def _error(message: str, stream: TextIO) -> int:
    print(message, file=stream)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the calculator and return the process exit code."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.list_years:
        for year in available_years():
            print(year)
        return 0

    if args.year is None:
        parser.error("Missing required positional argument: year")
    if args.gross_income is None:
        parser.error("Missing required positional argument: gross income")

    try:
        gross_income = Gbp.parse(args.gross_income)
    except GbpParseError as exc:
        return _error(
            f"Argument gross income is not a valid amount: {args.gross_income} ({exc})",
            sys.stderr,
        )

    try:
        config = load_year_configuration(args.year)
        schedule = load_schedule(args.year)
    except FileNotFoundError:
        return _error(f"No tax bands defined for year: {args.year}", sys.stderr)
    except ConfigurationError as exc:
        _LOGGER.error("Configuration for %s is invalid", args.year)
        return _error(str(exc), sys.stderr)

    breakdown = schedule.calculate(gross_income)

    if args.json:
        print(json.dumps(build_calculation_payload(breakdown, config), indent=2, ensure_ascii=False))
    else:
        print(render_breakdown(config.label, breakdown))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
