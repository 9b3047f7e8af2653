from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from portfolio_insights.ingestion import load_records
from portfolio_insights.pipeline import PortfolioAggregator
from portfolio_insights.services.filtering import TimePeriod


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _default_data_path() -> Path:
    return Path(__file__).parent / "data" / "startups_fixture.json"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Portfolio dashboard summary runner")
    parser.add_argument(
        "--data-file",
        type=Path,
        default=_default_data_path(),
        help="Path to a startups snapshot (JSON list)",
    )
    parser.add_argument(
        "--period",
        choices=[period.value for period in TimePeriod],
        default=TimePeriod.ALL.value,
        help="Time window applied to createdAt",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    _setup_logging(args.verbose)

    records = load_records(args.data_file)
    logging.info("Loaded %s startups from %s", len(records), args.data_file)

    summary = PortfolioAggregator().summarize(records, args.period)
    print(json.dumps(summary.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    main()
