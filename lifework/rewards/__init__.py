"""Incentive program: reward controller and native treasury."""

from lifework.rewards.controller import RewardController, RewardSettings, should_trigger
from lifework.rewards.treasury import TransferError, balance_of, deposit, transfer

__all__ = [
    "RewardController",
    "RewardSettings",
    "should_trigger",
    "TransferError",
    "balance_of",
    "deposit",
    "transfer",
]
