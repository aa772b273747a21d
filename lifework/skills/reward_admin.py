"""Reward Admin — CLI skill for the incentive program.

Usage:
    python3 -m lifework.skills.reward_admin --caller root set-root --account root
    python3 -m lifework.skills.reward_admin --caller root configure --enable --interval 5 --amount 100
    python3 -m lifework.skills.reward_admin --caller root fund --value 10000
    python3 -m lifework.skills.reward_admin --caller root shutdown
    python3 -m lifework.skills.reward_admin --caller root settings
    python3 -m lifework.skills.reward_admin events --verify

Exit codes:
    0 = OK
    1 = registry error (JSON body names it)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any

from dotenv import load_dotenv

from lifework.claims.errors import RegistryError
from lifework.contract import CallContext, LifeAndWork


def run(registry: LifeAndWork, args: argparse.Namespace) -> dict[str, Any]:
    ctx = CallContext(args.caller or "", getattr(args, "value", 0))

    if args.command == "set-root":
        registry.set_reward_root(ctx, args.account)
        return {"status": "OK", "root": args.account}

    if args.command == "configure":
        registry.configure_reward(ctx, args.enable, args.interval, args.amount)
        return {"status": "OK", "enabled": args.enable, "interval": args.interval, "amount": args.amount}

    if args.command == "fund":
        pool = registry.fund_reward(ctx)
        return {"status": "OK", "reward_balance": pool}

    if args.command == "shutdown":
        refunded = registry.shutdown_reward(ctx)
        return {"status": "OK", "refunded": refunded}

    if args.command == "settings":
        return {"status": "OK", "settings": registry.get_reward_settings(ctx).model_dump()}

    result: dict[str, Any] = {"status": "OK"}
    if args.verify:
        verify = registry.verify_events()
        result["event_log_integrity"] = "CLEAN" if verify.valid else "TAMPERED"
        result["verification_message"] = verify.message
    events = registry.events(event_type=args.type)
    result["events"] = [e.model_dump() for e in events[-args.recent:]] if args.recent else []
    result["event_count"] = len(events)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Life & Work — Reward Admin")
    parser.add_argument("--caller", default=os.environ.get("LIFEWORK_CALLER"))
    sub = parser.add_subparsers(dest="command", required=True)

    root = sub.add_parser("set-root", help="Claim or rotate the reward root")
    root.add_argument("--account", required=True)

    cfg = sub.add_parser("configure", help="Set enabled / interval / amount")
    cfg.add_argument("--enable", action="store_true")
    cfg.add_argument("--interval", type=int, required=True)
    cfg.add_argument("--amount", type=int, required=True)

    fund = sub.add_parser("fund", help="Add native funds to the reward pool")
    fund.add_argument("--value", type=int, required=True)

    sub.add_parser("shutdown", help="Disable rewards and refund the pool")
    sub.add_parser("settings", help="Show settings (root only)")

    ev = sub.add_parser("events", help="Inspect the event log")
    ev.add_argument("--verify", action="store_true")
    ev.add_argument("--type", default=None, help="Filter by event type")
    ev.add_argument("--recent", type=int, default=10)

    return parser


def main() -> None:
    load_dotenv()
    args = build_parser().parse_args()

    try:
        result = run(LifeAndWork.open(), args)
    except RegistryError as e:
        print(json.dumps(e.to_dict(), indent=2))
        sys.exit(1)

    print(json.dumps(result, indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
