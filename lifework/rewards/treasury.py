"""Native-currency balances for the registry host.

Stands in for the chain's balance and transfer primitives. Balances live
in the registry database so transfers commit or roll back together with
the message that made them.
"""

from __future__ import annotations

import sqlite3


class TransferError(Exception):
    """A native transfer could not be carried out."""


def balance_of(conn: sqlite3.Connection, account: str) -> int:
    row = conn.execute(
        "SELECT balance FROM balances WHERE account = ?", (account,)
    ).fetchone()
    return row[0] if row else 0


def deposit(conn: sqlite3.Connection, account: str, amount: int) -> int:
    """Credit `amount` out of thin air (genesis funding). Returns new balance."""
    if amount < 0:
        raise ValueError(f"Deposit amount must be non-negative, got {amount}")
    conn.execute(
        "INSERT INTO balances (account, balance) VALUES (?, ?) "
        "ON CONFLICT(account) DO UPDATE SET balance = balance + excluded.balance",
        (account, amount),
    )
    return balance_of(conn, account)


def transfer(conn: sqlite3.Connection, sender: str, recipient: str, amount: int) -> None:
    """Move `amount` from sender to recipient or raise TransferError."""
    if amount < 0:
        raise TransferError(f"Negative transfer amount: {amount}")
    if sender == recipient:
        raise TransferError("Sender and recipient are the same account")

    available = balance_of(conn, sender)
    if available < amount:
        raise TransferError(
            f"Insufficient funds in {sender}: have {available}, need {amount}"
        )

    conn.execute(
        "UPDATE balances SET balance = balance - ? WHERE account = ?",
        (amount, sender),
    )
    deposit(conn, recipient, amount)
