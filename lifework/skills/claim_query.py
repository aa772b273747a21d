"""Claim Query — CLI skill for read-only registry lookups.

Usage:
    python3 -m lifework.skills.claim_query --resume alice
    python3 -m lifework.skills.claim_query --details <fingerprint>
    python3 -m lifework.skills.claim_query --search "Blockchain"
    python3 -m lifework.skills.claim_query --verify-account alice
    python3 -m lifework.skills.claim_query --stats
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from dotenv import load_dotenv

from lifework.claims.schema import CATEGORY_ORDER
from lifework.contract import LifeAndWork


def query(registry: LifeAndWork, args: argparse.Namespace) -> dict[str, Any]:
    if args.resume:
        claims = registry.resume(args.resume)
        return {
            "status": "OK",
            "account": args.resume,
            "claim_count": len(claims),
            "claims": [c.to_summary() for c in claims],
        }

    if args.details:
        claim = registry.full_details(args.details)
        return {"status": "OK" if claim.exists else "NOT_FOUND", "claim": claim.to_summary()}

    if args.search is not None:
        matches = registry.matching_claims(args.search)
        return {
            "status": "OK",
            "query": args.search,
            "match_count": len(matches),
            "matches": [c.to_summary() for c in matches],
        }

    if args.verify_account:
        counts = registry.verify_account(args.verify_account)
        return {
            "status": "OK",
            "account": args.verify_account,
            "counts": {cat.name: n for cat, n in zip(CATEGORY_ORDER, counts)},
        }

    stats = registry.registry_stats()
    return {"status": "OK", **stats}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Life & Work — Query Claims")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--resume", metavar="ACCOUNT", help="Every claim made by an account")
    group.add_argument("--details", metavar="FINGERPRINT", help="Full record for one claim")
    group.add_argument("--search", metavar="TEXT", help="Literal substring search")
    group.add_argument("--verify-account", metavar="ACCOUNT", help="Per-category claim counts")
    group.add_argument("--stats", action="store_true", help="Registry summary")
    return parser


def main() -> None:
    load_dotenv()
    args = build_parser().parse_args()

    result = query(LifeAndWork.open(), args)
    print(json.dumps(result, indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
