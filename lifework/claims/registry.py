"""Claim submission — one flow for all five categories.

  submit: capacity → size → fingerprint → dedup → insert → ledger/index
          → ClaimMade<Category> event → reward hook

Keyword categories derive the fingerprint from (claimant, content).
Intellectual property takes the caller's file hash as-is.
"""

from __future__ import annotations

import logging
import sqlite3

from lifework.claims import store
from lifework.claims.errors import DataTooLarge, DuplicateClaim
from lifework.claims.schema import (
    KEYWORD_CATEGORIES,
    Claim,
    ClaimCategory,
    derive_fingerprint,
    normalize_fingerprint,
)
from lifework.config import LimitsConfig
from lifework.events.log import append_event
from lifework.rewards.controller import RewardController

log = logging.getLogger("lifework.registry")


class ClaimRegistry:
    def __init__(self, rewards: RewardController, limits: LimitsConfig | None = None):
        self.rewards = rewards
        self.limits = limits or LimitsConfig()

    def _check_capacity(
        self,
        conn: sqlite3.Connection,
        caller: str,
        category: ClaimCategory,
        content: bytes,
        reference_link: bytes,
    ) -> None:
        held = store.account_claim_count(conn, caller, category)
        if held > self.limits.max_account_claims:
            raise DataTooLarge(
                f"{caller} already holds {held} {category.name} claims"
            )
        if len(content) > self.limits.max_content_bytes:
            raise DataTooLarge(
                f"Content is {len(content)} bytes (limit {self.limits.max_content_bytes})"
            )
        if len(reference_link) > self.limits.max_link_bytes:
            raise DataTooLarge(
                f"Link is {len(reference_link)} bytes (limit {self.limits.max_link_bytes})"
            )

    def submit(
        self,
        conn: sqlite3.Connection,
        caller: str,
        category: ClaimCategory,
        content: bytes,
        reference_link: bytes,
        fingerprint: str | bytes | None = None,
    ) -> str:
        """Accept a claim and return its fingerprint.

        `fingerprint` is required for INTELLECTUAL_PROPERTY and rejected for
        the keyword categories.
        """
        if category is ClaimCategory.UNSET:
            raise ValueError("Claim category must be set")
        if not isinstance(content, (bytes, bytearray)) or not isinstance(
            reference_link, (bytes, bytearray)
        ):
            raise TypeError("content and reference_link must be bytes")
        content, reference_link = bytes(content), bytes(reference_link)

        self._check_capacity(conn, caller, category, content, reference_link)

        if category in KEYWORD_CATEGORIES:
            if fingerprint is not None:
                raise ValueError(f"{category.name} claims derive their own fingerprint")
            claim_id = derive_fingerprint(caller, content)
        else:
            if fingerprint is None:
                raise ValueError("Intellectual property claims need a file fingerprint")
            claim_id = normalize_fingerprint(fingerprint)

        if store.contains_claim(conn, claim_id):
            raise DuplicateClaim(f"Claim {claim_id[:16]}... already exists")

        claim = Claim.create(category, caller, content, reference_link, claim_id)
        store.insert_claim(conn, claim)
        store.append_ledger(conn, claim_id)
        store.append_account_claim(conn, caller, category, claim_id)

        append_event(
            conn,
            category.event_name,
            {"claimant": caller, "content": content.hex(), "fingerprint": claim_id},
        )
        log.info("%s claim %s accepted from %s", category.name, claim_id[:16], caller)

        self.rewards.after_claim(conn, caller)
        return claim_id
