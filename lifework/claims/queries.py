"""Read-only projections over the registry.

Nothing here raises for missing data: unknown fingerprints come back as
the sentinel claim (category UNSET) or an empty list.
"""

from __future__ import annotations

import sqlite3

from lifework.claims import store
from lifework.claims.schema import CATEGORY_ORDER, Claim, decode_text, normalize_fingerprint


class QueryService:
    def full_details(self, conn: sqlite3.Connection, fingerprint: str | bytes) -> Claim:
        claim_id = normalize_fingerprint(fingerprint)
        return store.get_claim(conn, claim_id) or Claim.sentinel()

    def endorsers(self, conn: sqlite3.Connection, fingerprint: str | bytes) -> list[str]:
        return self.full_details(conn, fingerprint).endorsers

    def resume(self, conn: sqlite3.Connection, account: str) -> list[Claim]:
        """Every claim by `account`, grouped by category in CATEGORY_ORDER."""
        resume: list[Claim] = []
        for category in CATEGORY_ORDER:
            for claim_id in store.account_fingerprints(conn, account, category):
                resume.append(store.get_claim(conn, claim_id) or Claim.sentinel())
        return resume

    def matching_claims(self, conn: sqlite3.Connection, query: bytes | str) -> list[Claim]:
        """Literal, case-sensitive substring scan over the ledger, in ledger order."""
        needle = query if isinstance(query, str) else decode_text(query)
        matches: list[Claim] = []
        for claim_id in store.ledger_fingerprints(conn):
            claim = store.get_claim(conn, claim_id) or Claim.sentinel()
            if needle in claim.text:
                matches.append(claim)
        return matches

    def verify_account(self, conn: sqlite3.Connection, account: str) -> tuple[int, int, int, int, int]:
        """Per-category claim counts in CATEGORY_ORDER."""
        counts = tuple(
            store.account_claim_count(conn, account, category)
            for category in CATEGORY_ORDER
        )
        return counts  # type: ignore[return-value]

    def stats(self, conn: sqlite3.Connection) -> dict:
        total = store.ledger_length(conn)
        by_category = {
            category.name: conn.execute(
                "SELECT COUNT(*) FROM claims WHERE category = ?", (category.value,)
            ).fetchone()[0]
            for category in CATEGORY_ORDER
        }
        endorsements = conn.execute(
            "SELECT COALESCE(SUM(endorser_count), 0) FROM claims"
        ).fetchone()[0]
        hidden = conn.execute(
            "SELECT COUNT(*) FROM claims WHERE visible = 0"
        ).fetchone()[0]
        return {
            "total_claims": total,
            "category_counts": by_category,
            "total_endorsements": endorsements,
            "hidden_claims": hidden,
        }
