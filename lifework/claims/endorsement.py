"""Endorsements and visibility — the only mutations a stored claim allows."""

from __future__ import annotations

import logging
import sqlite3

from lifework.claims import store
from lifework.claims.errors import CallerNotOwner, DuplicateEndorsement, NonexistentClaim
from lifework.claims.schema import ENDORSED_EVENT, Claim, normalize_fingerprint
from lifework.config import LimitsConfig
from lifework.events.log import append_event

log = logging.getLogger("lifework.endorsement")


class EndorsementManager:
    def __init__(self, limits: LimitsConfig | None = None):
        self.limits = limits or LimitsConfig()

    def endorse(self, conn: sqlite3.Connection, caller: str, fingerprint: str | bytes) -> bool:
        """Record `caller` as an endorser. Returns False when the list is full.

        A full list still emits ClaimEndorsed; only the stored list and
        count stay as they were.
        """
        claim_id = normalize_fingerprint(fingerprint)
        claim = store.get_claim(conn, claim_id)
        if claim is None:
            raise NonexistentClaim(f"No claim {claim_id[:16]}...")
        if claim.has_endorser(caller):
            raise DuplicateEndorsement(f"{caller} already endorsed {claim_id[:16]}...")

        stored = len(claim.endorsers) < self.limits.max_endorsers
        if stored:
            claim.add_endorser(caller)
            store.append_endorser(conn, claim)
            log.info("%s endorsed %s (%d endorsers)", caller, claim_id[:16], claim.endorser_count)
        else:
            log.warning(
                "Endorser list full for %s; %s acknowledged but not stored",
                claim_id[:16], caller,
            )

        append_event(
            conn,
            ENDORSED_EVENT,
            {"claimant": claim.claimant, "fingerprint": claim_id, "endorser": caller},
        )
        return stored


class VisibilityManager:
    def set_visibility(
        self,
        conn: sqlite3.Connection,
        caller: str,
        fingerprint: str | bytes,
        show: bool,
    ) -> None:
        claim_id = normalize_fingerprint(fingerprint)
        claim = store.get_claim(conn, claim_id) or Claim.sentinel()
        if claim.claimant != caller:
            raise CallerNotOwner(f"{caller} does not own {claim_id[:16]}...")
        store.update_visibility(conn, claim_id, show)
