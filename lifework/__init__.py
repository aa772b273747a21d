"""Life & Work — registry of self-asserted work and life claims.

Claims are fingerprinted, endorsable by other accounts, and every N-th
accepted claim can earn its submitter a reward.
"""

from lifework.contract import CallContext, LifeAndWork

__all__ = ["CallContext", "LifeAndWork"]
