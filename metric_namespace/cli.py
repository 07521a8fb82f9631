"""CLI entrypoint for the metric namespace classifier."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .api import MetricNamespaceAPI
from .models import LOG_LEVELS, AggregationResponse, MetricNameListing, MetricNamespaceConfig

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metric-namespace", description="Classify metric index aggregation buckets."
    )
    parser.add_argument(
        "--aggregation-name",
        default="metric_name_tokens",
        help="Aggregation holding the metric index buckets.",
    )
    parser.add_argument(
        "--base-level",
        type=int,
        default=None,
        help="Number of segments of the reference prefix.",
    )
    parser.add_argument(
        "--default-base-level",
        type=int,
        default=0,
        help="Base level used when neither --base-level nor --prefix is given.",
    )
    parser.add_argument(
        "--next-level-only",
        action="store_true",
        help="Omit complete metric names from the output.",
    )
    parser.add_argument(
        "--log-level", default="warning", type=str.lower, choices=LOG_LEVELS, help="Logging level."
    )

    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="Print the listing as JSON.")
    classify.add_argument("path", help="Search response JSON file, '-' for stdin.")
    classify.add_argument("--prefix", default=None, help="Query prefix, e.g. foo.bar.*")
    classify.add_argument("--pretty", action="store_true", help="Pretty-print JSON output.")

    names = sub.add_parser("names", help="Print one metric name per line.")
    names.add_argument("path", help="Search response JSON file, '-' for stdin.")
    names.add_argument("--prefix", default=None, help="Query prefix, e.g. foo.bar.*")

    return parser


def _config_from_args(args: argparse.Namespace) -> MetricNamespaceConfig:
    return MetricNamespaceConfig(
        aggregation_name=args.aggregation_name,
        default_base_level=args.default_base_level,
        include_complete_names=not args.next_level_only,
    )


def _load_listing(api: MetricNamespaceAPI, args: argparse.Namespace) -> MetricNameListing:
    if args.path == "-":
        response = AggregationResponse.model_validate_json(sys.stdin.read())
        return api.browse_response(response, base_level=args.base_level, prefix=args.prefix)
    return api.browse_file(Path(args.path), base_level=args.base_level, prefix=args.prefix)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    if args.base_level is not None and args.base_level < 0:
        parser.error("--base-level must be >= 0")
    if args.default_base_level < 0:
        parser.error("--default-base-level must be >= 0")
    api = MetricNamespaceAPI(_config_from_args(args))

    try:
        listing = _load_listing(api, args)
    except (OSError, ValueError) as exc:
        logger.debug("failed to classify %s", args.path, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.command == "classify":
        print(api.listing_json(listing, pretty=args.pretty))
        return 0
    if args.command == "names":
        for entry in listing.metric_names:
            kind = "complete" if entry.is_complete_name else "next"
            print(f"{entry.name} ({kind})")
        return 0
    parser.error(f"Unsupported command {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
