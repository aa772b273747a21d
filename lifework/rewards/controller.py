"""Reward controller — deterministic every-N-th-claim payout.

Settings are a singleton row. State machine over (root_set, enabled):

  uninitialized  set_root by anyone, exactly once
  initialized    set_root only by the current root (self-rotation)

configure / fund / shutdown are root-only. get_settings shows the real
values to root and an all-default RewardSettings to everyone else.

after_claim runs at the end of every accepted submission. It bumps the
claim counter and pays `amount` to the submitter when the counter lands on
a multiple of `interval` and the program is enabled and funded. A failed
transfer raises PayoutFailed, which aborts the submission as well.
"""

from __future__ import annotations

import logging
import sqlite3

from pydantic import BaseModel

from lifework.claims.errors import PayoutFailed, PermissionDenied, ZeroBalance
from lifework.claims.schema import REWARD_EVENT
from lifework.config import RewardConfig
from lifework.events.log import append_event
from lifework.rewards.treasury import TransferError, balance_of, transfer

log = logging.getLogger("lifework.rewards")


class RewardSettings(BaseModel):
    root: str = ""
    root_set: bool = False
    enabled: bool = False
    interval: int = 0
    amount: int = 0
    balance: int = 0
    total_paid: int = 0
    claim_counter: int = 0


_FIELDS = tuple(RewardSettings.model_fields)


def should_trigger(counter: int, interval: int) -> bool:
    """True when `counter` is a positive multiple of `interval`."""
    if interval <= 0:
        return False
    return counter > 0 and counter % interval == 0


class RewardController:
    def __init__(self, registry_account: str, config: RewardConfig | None = None):
        self.registry_account = registry_account
        self.config = config or RewardConfig()

    # ── Persistence ──────────────────────────────────────────────────

    def load(self, conn: sqlite3.Connection) -> RewardSettings:
        row = conn.execute(
            f"SELECT {', '.join(_FIELDS)} FROM reward_settings WHERE id = 1"
        ).fetchone()
        return RewardSettings(**dict(zip(_FIELDS, row)))

    def _save(self, conn: sqlite3.Connection, settings: RewardSettings) -> None:
        data = settings.model_dump()
        assignments = ", ".join(f"{name} = ?" for name in _FIELDS)
        conn.execute(
            f"UPDATE reward_settings SET {assignments} WHERE id = 1",
            tuple(int(v) if isinstance(v, bool) else v for v in data.values()),
        )

    @staticmethod
    def _require_root(settings: RewardSettings, caller: str) -> None:
        if not settings.root_set or caller != settings.root:
            raise PermissionDenied(f"{caller} is not the reward root")

    def disbursable(self, conn: sqlite3.Connection) -> int:
        """Registry funds above the reserve floor."""
        return balance_of(conn, self.registry_account) - self.config.reserve_floor

    # ── Admin ────────────────────────────────────────────────────────

    def set_root(self, conn: sqlite3.Connection, caller: str, candidate: str) -> None:
        if not candidate:
            raise ValueError("Reward root account cannot be empty")
        settings = self.load(conn)
        if settings.root_set:
            self._require_root(settings, caller)
        settings.root = candidate
        settings.root_set = True
        self._save(conn, settings)
        log.info("Reward root set to %s by %s", candidate, caller)

    def configure(
        self,
        conn: sqlite3.Connection,
        caller: str,
        enabled: bool,
        interval: int,
        amount: int,
    ) -> None:
        if amount < 0:
            raise ValueError(f"Reward amount must be non-negative, got {amount}")
        settings = self.load(conn)
        self._require_root(settings, caller)
        settings.enabled = enabled
        settings.interval = interval
        settings.amount = amount
        self._save(conn, settings)
        log.info("Rewards configured: enabled=%s interval=%d amount=%d", enabled, interval, amount)

    def fund(self, conn: sqlite3.Connection, caller: str, value: int) -> int:
        """Move the attached value into the registry account. Returns new balance."""
        settings = self.load(conn)
        self._require_root(settings, caller)
        try:
            transfer(conn, caller, self.registry_account, value)
        except TransferError as e:
            raise PayoutFailed(f"Funding transfer failed: {e}") from e
        settings.balance += value
        self._save(conn, settings)
        return settings.balance

    def shutdown(self, conn: sqlite3.Connection, caller: str) -> int:
        """Disable rewards and refund everything above the floor to root."""
        settings = self.load(conn)
        self._require_root(settings, caller)
        settings.enabled = False

        refund = self.disbursable(conn)
        if refund <= 0:
            raise ZeroBalance("No disbursable funds above the reserve floor")
        try:
            transfer(conn, self.registry_account, settings.root, refund)
        except TransferError as e:
            raise PayoutFailed(f"Refund transfer failed: {e}") from e

        settings.balance = 0
        self._save(conn, settings)
        log.info("Rewards shut down, refunded %d to %s", refund, settings.root)
        return refund

    def get_settings(self, conn: sqlite3.Connection, caller: str) -> RewardSettings:
        settings = self.load(conn)
        if settings.root_set and caller == settings.root:
            return settings
        return RewardSettings()

    # ── Trigger ──────────────────────────────────────────────────────

    def after_claim(self, conn: sqlite3.Connection, claimant: str) -> int:
        """Post-claim hook. Returns the amount paid (0 when nothing triggered)."""
        settings = self.load(conn)
        settings.claim_counter += 1

        paid = 0
        if (
            settings.enabled
            and settings.balance > settings.amount
            and balance_of(conn, self.registry_account) > settings.amount + self.config.payout_margin
            and should_trigger(settings.claim_counter, settings.interval)
        ):
            try:
                transfer(conn, self.registry_account, claimant, settings.amount)
            except TransferError as e:
                log.warning("Reward payout to %s failed: %s", claimant, e)
                raise PayoutFailed(f"Reward payout failed: {e}") from e

            settings.balance -= settings.amount
            settings.total_paid += settings.amount
            paid = settings.amount
            append_event(conn, REWARD_EVENT, {"claimant": claimant, "amount": paid})
            log.info("Reward of %d paid to %s on claim #%d", paid, claimant, settings.claim_counter)

        self._save(conn, settings)
        return paid
