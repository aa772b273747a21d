"""Claim storage — SQLite tables behind the registry.

Tables:
  claims          fingerprint → claim record (RecordStore)
  claim_endorsers ordered endorser list per claim
  account_claims  (account, category) → ordered fingerprints (AccountIndex)
  claim_ledger    append-only fingerprint list (GlobalLedger)
  reward_settings singleton reward configuration row
  balances        native balances held by the treasury
  events          hash-chained event log

Every message runs inside RegistryDB.transaction(): one connection, one
BEGIN IMMEDIATE, commit on success, rollback on any exception. The helper
functions below take that connection and never commit themselves.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from lifework.claims.schema import Claim, ClaimCategory

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS claims (
    fingerprint      TEXT PRIMARY KEY,
    category         INTEGER NOT NULL,
    claimant         TEXT NOT NULL,
    content          BLOB NOT NULL,
    reference_link   BLOB NOT NULL,
    endorser_count   INTEGER NOT NULL DEFAULT 0,
    visible          INTEGER NOT NULL DEFAULT 1
);
CREATE INDEX IF NOT EXISTS idx_claims_claimant ON claims(claimant);

CREATE TABLE IF NOT EXISTS claim_endorsers (
    fingerprint  TEXT NOT NULL,
    endorser     TEXT NOT NULL,
    position     INTEGER NOT NULL,
    PRIMARY KEY (fingerprint, endorser)
);
CREATE INDEX IF NOT EXISTS idx_endorsers_account ON claim_endorsers(endorser);

CREATE TABLE IF NOT EXISTS account_claims (
    account      TEXT NOT NULL,
    category     INTEGER NOT NULL,
    position     INTEGER NOT NULL,
    fingerprint  TEXT NOT NULL,
    PRIMARY KEY (account, category, position)
);

CREATE TABLE IF NOT EXISTS claim_ledger (
    seq          INTEGER PRIMARY KEY AUTOINCREMENT,
    fingerprint  TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS reward_settings (
    id             INTEGER PRIMARY KEY CHECK (id = 1),
    root           TEXT NOT NULL DEFAULT '',
    root_set       INTEGER NOT NULL DEFAULT 0,
    enabled        INTEGER NOT NULL DEFAULT 0,
    interval       INTEGER NOT NULL DEFAULT 0,
    amount         INTEGER NOT NULL DEFAULT 0,
    balance        INTEGER NOT NULL DEFAULT 0,
    total_paid     INTEGER NOT NULL DEFAULT 0,
    claim_counter  INTEGER NOT NULL DEFAULT 0
);
INSERT OR IGNORE INTO reward_settings (id) VALUES (1);

CREATE TABLE IF NOT EXISTS balances (
    account  TEXT PRIMARY KEY,
    balance  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS events (
    seq         INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id    TEXT NOT NULL UNIQUE,
    event_hash  TEXT NOT NULL UNIQUE,
    prev_hash   TEXT NOT NULL,
    timestamp   TEXT NOT NULL,
    event_type  TEXT NOT NULL,
    payload     TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_events_type ON events(event_type);
"""


class RegistryDB:
    """SQLite database shared by every registry component."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._init_db()

    def _init_db(self) -> None:
        with self._lock:
            conn = self._conn()
            conn.executescript(_SCHEMA_SQL)
            conn.close()

    def _conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=10, isolation_level=None)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run one message atomically. Any exception rolls everything back."""
        with self._lock:
            conn = self._conn()
            try:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    yield conn
                except BaseException:
                    conn.execute("ROLLBACK")
                    raise
                conn.execute("COMMIT")
            finally:
                conn.close()

    @contextmanager
    def reader(self) -> Iterator[sqlite3.Connection]:
        conn = self._conn()
        try:
            yield conn
        finally:
            conn.close()


# ── RecordStore ──────────────────────────────────────────────────────


def contains_claim(conn: sqlite3.Connection, fingerprint: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM claims WHERE fingerprint = ?", (fingerprint,)
    ).fetchone()
    return row is not None


def get_claim(conn: sqlite3.Connection, fingerprint: str) -> Claim | None:
    row = conn.execute(
        "SELECT category, claimant, content, reference_link, endorser_count, visible "
        "FROM claims WHERE fingerprint = ?",
        (fingerprint,),
    ).fetchone()
    if row is None:
        return None

    endorsers = [
        r[0]
        for r in conn.execute(
            "SELECT endorser FROM claim_endorsers WHERE fingerprint = ? ORDER BY position ASC",
            (fingerprint,),
        ).fetchall()
    ]
    return Claim(
        category=ClaimCategory(row[0]),
        claimant=row[1],
        content=bytes(row[2]),
        fingerprint=fingerprint,
        endorser_count=row[4],
        reference_link=bytes(row[3]),
        visible=bool(row[5]),
        endorsers=endorsers,
    )


def insert_claim(conn: sqlite3.Connection, claim: Claim) -> None:
    conn.execute(
        "INSERT INTO claims "
        "(fingerprint, category, claimant, content, reference_link, endorser_count, visible) "
        "VALUES (?,?,?,?,?,?,?)",
        (
            claim.fingerprint,
            claim.category.value,
            claim.claimant,
            claim.content,
            claim.reference_link,
            claim.endorser_count,
            int(claim.visible),
        ),
    )
    for pos, endorser in enumerate(claim.endorsers):
        conn.execute(
            "INSERT INTO claim_endorsers (fingerprint, endorser, position) VALUES (?,?,?)",
            (claim.fingerprint, endorser, pos),
        )


def append_endorser(conn: sqlite3.Connection, claim: Claim) -> None:
    """Persist the last endorser on `claim` and its updated count."""
    conn.execute(
        "INSERT INTO claim_endorsers (fingerprint, endorser, position) VALUES (?,?,?)",
        (claim.fingerprint, claim.endorsers[-1], len(claim.endorsers) - 1),
    )
    conn.execute(
        "UPDATE claims SET endorser_count = ? WHERE fingerprint = ?",
        (claim.endorser_count, claim.fingerprint),
    )


def update_visibility(conn: sqlite3.Connection, fingerprint: str, visible: bool) -> None:
    conn.execute(
        "UPDATE claims SET visible = ? WHERE fingerprint = ?",
        (int(visible), fingerprint),
    )


# ── AccountIndex ─────────────────────────────────────────────────────


def account_claim_count(
    conn: sqlite3.Connection, account: str, category: ClaimCategory
) -> int:
    return conn.execute(
        "SELECT COUNT(*) FROM account_claims WHERE account = ? AND category = ?",
        (account, category.value),
    ).fetchone()[0]


def account_fingerprints(
    conn: sqlite3.Connection, account: str, category: ClaimCategory
) -> list[str]:
    rows = conn.execute(
        "SELECT fingerprint FROM account_claims "
        "WHERE account = ? AND category = ? ORDER BY position ASC",
        (account, category.value),
    ).fetchall()
    return [r[0] for r in rows]


def append_account_claim(
    conn: sqlite3.Connection, account: str, category: ClaimCategory, fingerprint: str
) -> None:
    position = account_claim_count(conn, account, category)
    conn.execute(
        "INSERT INTO account_claims (account, category, position, fingerprint) "
        "VALUES (?,?,?,?)",
        (account, category.value, position, fingerprint),
    )


# ── GlobalLedger ─────────────────────────────────────────────────────


def append_ledger(conn: sqlite3.Connection, fingerprint: str) -> int:
    cur = conn.execute(
        "INSERT INTO claim_ledger (fingerprint) VALUES (?)", (fingerprint,)
    )
    return cur.lastrowid


def ledger_fingerprints(conn: sqlite3.Connection) -> list[str]:
    """Every accepted fingerprint, oldest first."""
    rows = conn.execute(
        "SELECT fingerprint FROM claim_ledger ORDER BY seq ASC"
    ).fetchall()
    return [r[0] for r in rows]


def ledger_length(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM claim_ledger").fetchone()[0]
