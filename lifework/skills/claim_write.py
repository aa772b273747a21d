"""Claim Write — CLI skill for submitting, endorsing, and hiding claims.

Usage:
    python3 -m lifework.skills.claim_write submit --caller alice --category expertise \
        --content "Blockchain, Rust" --link https://example.com/cv
    python3 -m lifework.skills.claim_write submit-ip --caller alice --content "Paper" \
        --link ipfs://... --file paper.pdf
    python3 -m lifework.skills.claim_write endorse --caller bob --fingerprint <hex>
    python3 -m lifework.skills.claim_write visibility --caller alice --fingerprint <hex> --hide

--caller falls back to $LIFEWORK_CALLER.
"""

from __future__ import annotations

import argparse
import hashlib
import json
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from lifework.claims.errors import RegistryError
from lifework.contract import CallContext, LifeAndWork


def hash_file(path: Path) -> str:
    """SHA-256 of a file, used as the IP claim fingerprint."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def run(registry: LifeAndWork, args: argparse.Namespace) -> dict[str, Any]:
    ctx = CallContext(args.caller)

    if args.command == "submit":
        fp = registry.submit_claim(ctx, args.category, args.content.encode(), args.link.encode())
        return {"status": "OK", "fingerprint": fp, "message": f"Claim recorded: {fp}"}

    if args.command == "submit-ip":
        fp = args.fingerprint or hash_file(Path(args.file))
        fp = registry.submit_ip_claim(ctx, args.content.encode(), args.link.encode(), fp)
        return {"status": "OK", "fingerprint": fp, "message": f"IP claim recorded: {fp}"}

    if args.command == "endorse":
        stored = registry.endorse(ctx, args.fingerprint)
        return {
            "status": "OK",
            "stored": stored,
            "endorsers": len(registry.endorsers(args.fingerprint)),
        }

    registry.set_visibility(ctx, args.fingerprint, not args.hide)
    return {"status": "OK", "visible": not args.hide}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Life & Work — Write Claims")
    parser.add_argument("--caller", default=os.environ.get("LIFEWORK_CALLER"))
    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Submit a keyword claim")
    submit.add_argument(
        "--category", required=True,
        choices=["work_history", "education", "expertise", "good_deed"],
    )
    submit.add_argument("--content", required=True)
    submit.add_argument("--link", default="")

    ip = sub.add_parser("submit-ip", help="Submit an intellectual-property claim")
    ip.add_argument("--content", required=True)
    ip.add_argument("--link", default="")
    source = ip.add_mutually_exclusive_group(required=True)
    source.add_argument("--fingerprint", help="Precomputed SHA-256 of the work")
    source.add_argument("--file", help="File to hash")

    endorse = sub.add_parser("endorse", help="Endorse a claim")
    endorse.add_argument("--fingerprint", required=True)

    vis = sub.add_parser("visibility", help="Show or hide one of your claims")
    vis.add_argument("--fingerprint", required=True)
    vis.add_argument("--hide", action="store_true")

    return parser


def main() -> None:
    load_dotenv()
    args = build_parser().parse_args()
    if not args.caller:
        print(json.dumps({"status": "ERROR", "error": "--caller or LIFEWORK_CALLER required"}))
        sys.exit(1)

    try:
        result = run(LifeAndWork.open(), args)
    except RegistryError as e:
        print(json.dumps(e.to_dict(), indent=2))
        sys.exit(1)

    print(json.dumps(result, indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
