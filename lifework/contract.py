"""Life & Work registry — the message surface.

Every public method is one message. Mutating messages take a CallContext
(caller identity plus any attached native value) and run in a single
database transaction, so a message either lands completely or not at all.
Read-only messages return values directly and never raise for missing data.

Usage:
    registry = LifeAndWork.open()
    fp = registry.submit_claim(CallContext("alice"), "expertise", b"Rust", b"https://...")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lifework.claims.endorsement import EndorsementManager, VisibilityManager
from lifework.claims.queries import QueryService
from lifework.claims.registry import ClaimRegistry
from lifework.claims.schema import Claim, ClaimCategory, parse_category
from lifework.claims.store import RegistryDB
from lifework.config import RegistryConfig, load_registry_config
from lifework.events import log as event_log
from lifework.events.log import EventVerifyResult, RegistryEvent
from lifework.rewards import treasury
from lifework.rewards.controller import RewardController, RewardSettings


@dataclass(frozen=True)
class CallContext:
    """Who is calling, and how much native value came with the call."""

    caller: str
    value: int = 0


class LifeAndWork:
    def __init__(self, config: RegistryConfig | None = None, db_path: str | Path | None = None):
        self.config = config or RegistryConfig()
        self.db = RegistryDB(db_path or self.config.db_path)
        self.registry_account = self.config.registry_account

        self.rewards = RewardController(self.registry_account, self.config.rewards)
        self.claims = ClaimRegistry(self.rewards, self.config.limits)
        self.endorsements = EndorsementManager(self.config.limits)
        self.visibility = VisibilityManager()
        self.queries = QueryService()

    @classmethod
    def open(cls, config_path: Path | None = None) -> "LifeAndWork":
        """Build from config/registry.yaml (plus env overrides)."""
        return cls(load_registry_config(config_path))

    # ── Claims ───────────────────────────────────────────────────────

    def submit_claim(
        self,
        ctx: CallContext,
        category: ClaimCategory | str | int,
        content: bytes,
        reference_link: bytes,
    ) -> str:
        """Submit a keyword claim (work history, education, expertise, good deed)."""
        cat = parse_category(category)
        if cat in (ClaimCategory.INTELLECTUAL_PROPERTY, ClaimCategory.UNSET):
            raise ValueError(f"submit_claim does not take {cat.name}; use submit_ip_claim")
        with self.db.transaction() as conn:
            return self.claims.submit(conn, ctx.caller, cat, content, reference_link)

    def submit_ip_claim(
        self,
        ctx: CallContext,
        content: bytes,
        reference_link: bytes,
        fingerprint: str | bytes,
    ) -> str:
        """Submit an intellectual-property claim keyed by the file's hash."""
        with self.db.transaction() as conn:
            return self.claims.submit(
                conn, ctx.caller, ClaimCategory.INTELLECTUAL_PROPERTY,
                content, reference_link, fingerprint,
            )

    def endorse(self, ctx: CallContext, fingerprint: str | bytes) -> bool:
        with self.db.transaction() as conn:
            return self.endorsements.endorse(conn, ctx.caller, fingerprint)

    def set_visibility(self, ctx: CallContext, fingerprint: str | bytes, show: bool) -> None:
        with self.db.transaction() as conn:
            self.visibility.set_visibility(conn, ctx.caller, fingerprint, show)

    # ── Queries ──────────────────────────────────────────────────────

    def resume(self, account: str) -> list[Claim]:
        with self.db.reader() as conn:
            return self.queries.resume(conn, account)

    def full_details(self, fingerprint: str | bytes) -> Claim:
        with self.db.reader() as conn:
            return self.queries.full_details(conn, fingerprint)

    def endorsers(self, fingerprint: str | bytes) -> list[str]:
        with self.db.reader() as conn:
            return self.queries.endorsers(conn, fingerprint)

    def matching_claims(self, query: bytes | str) -> list[Claim]:
        with self.db.reader() as conn:
            return self.queries.matching_claims(conn, query)

    def verify_account(self, account: str) -> tuple[int, int, int, int, int]:
        with self.db.reader() as conn:
            return self.queries.verify_account(conn, account)

    def registry_stats(self) -> dict[str, Any]:
        with self.db.reader() as conn:
            stats = self.queries.stats(conn)
            verify = event_log.verify_events(conn)
        stats["event_count"] = verify.total_events
        stats["event_log_valid"] = verify.valid
        return stats

    # ── Rewards ──────────────────────────────────────────────────────

    def set_reward_root(self, ctx: CallContext, account: str) -> None:
        with self.db.transaction() as conn:
            self.rewards.set_root(conn, ctx.caller, account)

    def configure_reward(self, ctx: CallContext, enabled: bool, interval: int, amount: int) -> None:
        with self.db.transaction() as conn:
            self.rewards.configure(conn, ctx.caller, enabled, interval, amount)

    def fund_reward(self, ctx: CallContext) -> int:
        """Payable: ctx.value moves into the reward pool. Returns the pool balance."""
        with self.db.transaction() as conn:
            return self.rewards.fund(conn, ctx.caller, ctx.value)

    def shutdown_reward(self, ctx: CallContext) -> int:
        with self.db.transaction() as conn:
            return self.rewards.shutdown(conn, ctx.caller)

    def get_reward_settings(self, ctx: CallContext) -> RewardSettings:
        with self.db.reader() as conn:
            return self.rewards.get_settings(conn, ctx.caller)

    # ── Host ─────────────────────────────────────────────────────────

    def deposit(self, account: str, amount: int) -> int:
        """Credit native funds to an account (genesis / faucet)."""
        with self.db.transaction() as conn:
            return treasury.deposit(conn, account, amount)

    def balance_of(self, account: str) -> int:
        with self.db.reader() as conn:
            return treasury.balance_of(conn, account)

    def events(self, *, since_seq: int = 0, event_type: str | None = None) -> list[RegistryEvent]:
        with self.db.reader() as conn:
            return event_log.get_events(conn, since_seq=since_seq, event_type=event_type)

    def verify_events(self) -> EventVerifyResult:
        with self.db.reader() as conn:
            return event_log.verify_events(conn)

    def export_events(self, path: str | Path) -> int:
        with self.db.reader() as conn:
            return event_log.export_events_jsonl(conn, path)
