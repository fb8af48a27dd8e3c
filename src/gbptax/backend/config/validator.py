"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
import re
from collections import Counter
from typing import Sequence

from pydantic import ValidationError

from .year_config import (
    ConfigurationError,
    TopRateConfig,
    YearConfiguration,
    available_years,
    load_year_configuration,
)

_LABEL_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_bands(config: YearConfiguration) -> list[str]:
    errors: list[str] = []
    bands = list(config.bands)

    previous = 0
    for band in bands:
        if band.threshold <= previous:
            errors.append(
                _format_scope(
                    f"bands.{band.name}",
                    f"threshold {band.threshold} must exceed the previous threshold {previous}",
                )
            )
        if band.rate < 0 or band.rate > 1:
            errors.append(
                _format_scope(f"bands.{band.name}", f"rate {band.rate} must be between 0 and 1")
            )
        previous = band.threshold

    rates = [band.rate for band in bands]
    if rates != sorted(rates):
        errors.append(_format_scope("bands", "rates should not decrease between bands"))

    names = [band.name for band in bands] + [config.top_rate.name]
    duplicates = [name for name, count in Counter(names).items() if count > 1]
    if duplicates:
        errors.append(
            _format_scope("bands", f"duplicate band names detected: {sorted(duplicates)}")
        )

    return errors


def _validate_top_rate(config: YearConfiguration) -> list[str]:
    errors: list[str] = []
    top_rate: TopRateConfig = config.top_rate

    if top_rate.rate < 0 or top_rate.rate > 1:
        errors.append(
            _format_scope("top_rate", f"rate {top_rate.rate} must be between 0 and 1")
        )

    if config.bands and top_rate.rate < config.bands[-1].rate:
        errors.append(
            _format_scope(
                "top_rate",
                f"rate {top_rate.rate} is lower than the final band rate {config.bands[-1].rate}",
            )
        )

    return errors


def _validate_meta(config: YearConfiguration) -> list[str]:
    label = config.meta.get("label") if config.meta else None
    if label is None:
        return []

    match = _LABEL_PATTERN.match(str(label))
    if not match:
        return [_format_scope("meta.label", f"label '{label}' should look like YYYY-YYYY")]

    start, end = (int(part) for part in match.groups())
    if start != config.year or end != config.year + 1:
        return [
            _format_scope(
                "meta.label",
                f"label '{label}' does not match tax year {config.year}-{config.year + 1}",
            )
        ]
    return []


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation errors for ``config``."""

    errors: list[str] = []

    if config.tax_free_allowance < 0:
        errors.append(_format_scope("tax_free_allowance", "allowance must be non-negative"))

    errors.extend(_validate_bands(config))
    errors.extend(_validate_top_rate(config))
    errors.extend(_validate_meta(config))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ConfigurationError, ValidationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
