from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from config import (
    CANDIDATE_POOL_LIMIT,
    MATCH_SCORE_THRESHOLD,
    PROFILES_FILE,
    SUGGESTIONS_FILE,
)
from .services.llm_service import OfflineLLMService
from .services.matching_service import MatchingService
from .services.profile_store import CustomerNotFoundError, JsonProfileStore, StoreError
from .services.seed_data import generate_profiles
from .services.suggestion_store import JsonlSuggestionStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate ranked partner suggestions for a matchmaking customer."
    )
    parser.add_argument("--profiles", type=Path, default=PROFILES_FILE, help="Path to profiles JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    suggest = sub.add_parser("suggest", help="Score the candidate pool for one customer")
    suggest.add_argument("customer_id", help="Id of the customer to match")
    suggest.add_argument("--suggestions", type=Path, default=SUGGESTIONS_FILE, help="Path to suggestions JSONL file")
    suggest.add_argument(
        "--limit",
        type=int,
        default=CANDIDATE_POOL_LIMIT,
        help=f"Maximum candidates to score (default: {CANDIDATE_POOL_LIMIT})",
    )
    suggest.add_argument(
        "--threshold",
        type=int,
        default=MATCH_SCORE_THRESHOLD,
        help=f"Drop suggestions scoring at or below this (default: {MATCH_SCORE_THRESHOLD})",
    )
    suggest.add_argument("--no-intros", action="store_true", help="Skip intro generation")
    suggest.add_argument("--offline", action="store_true", help="Use heuristic scoring only")
    suggest.add_argument("--timeout", type=float, default=None, help="Overall timeout in seconds")

    seed = sub.add_parser("seed", help="Write a synthetic candidate pool to the profiles file")
    seed.add_argument("--count", type=int, default=100, help="Number of profiles (default: 100)")
    seed.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible pool")
    return parser.parse_args(argv)


def run_suggest(args: argparse.Namespace) -> int:
    if args.limit < 1:
        raise SystemExit("--limit must be a positive integer")
    service = MatchingService(
        JsonProfileStore(args.profiles),
        JsonlSuggestionStore(args.suggestions),
        llm_service=OfflineLLMService() if args.offline else None,
        threshold=args.threshold,
        pool_limit=args.limit,
        generate_intros=not args.no_intros,
    )
    try:
        run = service.get_suggestions_sync(args.customer_id, timeout=args.timeout)
    except CustomerNotFoundError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except StoreError as e:
        print(f"❌ Store error: {e}", file=sys.stderr)
        return 2
    print(json.dumps(run.to_dict(), ensure_ascii=False, indent=2))
    return 0


def run_seed(args: argparse.Namespace) -> int:
    store = JsonProfileStore(args.profiles)
    written = store.save(generate_profiles(args.count, seed=args.seed))
    print(f"✅ Wrote {written} profiles to {args.profiles}")
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if args.command == "seed":
        raise SystemExit(run_seed(args))
    raise SystemExit(run_suggest(args))


if __name__ == "__main__":
    main()
