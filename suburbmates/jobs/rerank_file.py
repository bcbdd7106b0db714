"""CLI job to rerank a JSON file of business rows and print the result."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from suburbmates.core.flags import FlagLookup, static_flags
from suburbmates.etl.transform import to_business_records, to_search_context
from suburbmates.search.rerank import RERANK_FLAG, rerank, score_records

logger = logging.getLogger(__name__)


def load_rows(path: Path) -> List[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if isinstance(payload, dict):
        payload = payload.get("businesses", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a list of businesses")
    return payload


def run_rerank_file(
    *,
    input_path: Path,
    query: Optional[str],
    suburb: Optional[str],
    score_only: bool = False,
    force_enable: bool = False,
) -> List[Dict[str, Any]]:
    rows = load_rows(input_path)
    records = to_business_records(rows)
    context = to_search_context({"query": query, "suburb": suburb})
    logger.info("Loaded %d businesses from %s", len(records), input_path)

    lookup: Optional[FlagLookup] = static_flags({RERANK_FLAG: True}) if force_enable else None
    if score_only:
        scored = score_records(records, context, is_feature_enabled=lookup)
    else:
        scored = rerank(records, context, is_feature_enabled=lookup)
    return [s.to_dict() for s in scored]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rerank business search results from a JSON file")
    parser.add_argument("--input", dest="input_path", type=Path, required=True, help="JSON file of businesses")
    parser.add_argument("--query", dest="query", help="Free-text search query")
    parser.add_argument("--suburb", dest="suburb", help="Target suburb")
    parser.add_argument("--score-only", dest="score_only", action="store_true", help="Score without reordering")
    parser.add_argument(
        "--force-enable",
        dest="force_enable",
        action="store_true",
        help="Ignore the search_reranker feature flag and always score",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        items = run_rerank_file(
            input_path=args.input_path,
            query=args.query,
            suburb=args.suburb,
            score_only=args.score_only,
            force_enable=args.force_enable,
        )
    except (OSError, ValueError) as exc:
        logger.error("Rerank failed: %s", exc)
        raise SystemExit(2) from exc

    json.dump(items, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
