"""
Reelview CLI
============

Command-line interface for the review analysis pipeline.

Commands:
    analyze   - Search, classify and summarize reviews for a product
    features  - Aggregate a local JSON file of reviews (no network)

Usage:
    python -m src.orchestrator.cli analyze --product "Pixel 9"
    python -m src.orchestrator.cli analyze --product "Pixel 9" --force --json
    python -m src.orchestrator.cli features --file reviews.json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ..data.config import get_settings
from ..data.youtube_client import YouTubeError
from ..reviews.review_models import ProductAnalysis, ReviewRecord
from .logging_config import setup_logging
from .product_analysis import AnalysisError, ProductAnalysisPipeline, build_aggregator

logger = logging.getLogger(__name__)


def print_analysis(analysis: ProductAnalysis):
    """Human-readable report."""
    summary = analysis.summary
    print("=" * 60)
    print(f"{analysis.product_name.upper()}")
    print("=" * 60)
    print(f"Overall: {summary.overall_rating}/5 ({summary.overall_sentiment.value})")
    print(f"Videos analyzed: {summary.total_videos_analyzed}")
    if analysis.cached:
        print("(stored analysis, use --force to refresh)")
    print()
    print(summary.summary_text)
    print()

    for feature in analysis.features:
        print(f"{feature.name}: {feature.rating}/5 [{feature.sentiment.value}]")
        if feature.pros:
            print(f"  + {', '.join(feature.pros)}")
        if feature.cons:
            print(f"  - {', '.join(feature.cons)}")
        for quote in feature.quotes:
            print(f"  \"{quote.text}\" ({quote.reviewer})")


def cmd_analyze(args) -> int:
    """Run the full pipeline for one product."""
    store = None
    conn = None
    if not args.no_db:
        try:
            import psycopg2
            from ..reviews.review_store import ReviewAnalysisStore

            conn = psycopg2.connect(**get_settings().database.connection_dict)
            store = ReviewAnalysisStore(conn)
        except Exception as e:
            logger.warning(f"Database unavailable, results will not be stored: {e}")

    try:
        pipeline = ProductAnalysisPipeline(store=store)
        analysis = pipeline.run(args.product, force=args.force)
    except (AnalysisError, YouTubeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        if conn is not None:
            conn.close()

    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2, default=str))
    else:
        print_analysis(analysis)
    return 0


def load_reviews_file(path: str) -> List[ReviewRecord]:
    """Read a JSON list of review objects (or {"reviews": [...]})."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("reviews", [])
    if not isinstance(data, list):
        raise ValueError("Expected a JSON list of reviews")
    reviews = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Review #{index} is not a JSON object: {item!r}")
        reviews.append(ReviewRecord.from_raw(item))
    return reviews


def cmd_features(args) -> int:
    """Aggregate reviews from a JSON file."""
    try:
        reviews = load_reviews_file(args.file)
    except (OSError, ValueError) as e:
        print(f"ERROR: Could not read reviews: {e}", file=sys.stderr)
        return 1

    features = build_aggregator().aggregate(reviews)
    print(json.dumps([f.to_dict() for f in features], indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reelview",
        description="Per-feature sentiment from YouTube product reviews",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--json-logs", action="store_true", help="JSON structured logs")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a product")
    analyze.add_argument("--product", "-p", required=True, help="Product name")
    analyze.add_argument("--force", action="store_true", help="Ignore stored analysis")
    analyze.add_argument("--no-db", action="store_true", help="Skip the database")
    analyze.add_argument("--json", action="store_true", help="Print JSON")
    analyze.set_defaults(func=cmd_analyze)

    features = subparsers.add_parser("features", help="Aggregate reviews from a JSON file")
    features.add_argument("--file", "-f", required=True, help="Path to reviews JSON")
    features.set_defaults(func=cmd_features)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        get_settings().logging,
        verbose=args.verbose,
        json_output=True if args.json_logs else None,
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
