"""Claims — the Life & Work attestation registry core.

Schema:   lifework/claims/schema.py      (Claim, ClaimCategory, fingerprints)
Store:    lifework/claims/store.py       (SQLite tables, per-message transactions)
Registry: lifework/claims/registry.py    (submission flow for all categories)
Endorse:  lifework/claims/endorsement.py (endorsers, visibility)
Queries:  lifework/claims/queries.py     (resume, details, keyword search)
"""

from lifework.claims.errors import (
    CallerNotOwner,
    DataTooLarge,
    DuplicateClaim,
    DuplicateEndorsement,
    NonexistentClaim,
    PayoutFailed,
    PermissionDenied,
    RegistryError,
    ZeroBalance,
)
from lifework.claims.schema import (
    CATEGORY_ORDER,
    EMPTY_ACCOUNT,
    EMPTY_FINGERPRINT,
    Claim,
    ClaimCategory,
    derive_fingerprint,
    normalize_fingerprint,
    parse_category,
)

__all__ = [
    # Errors
    "RegistryError",
    "DuplicateClaim",
    "NonexistentClaim",
    "DuplicateEndorsement",
    "CallerNotOwner",
    "DataTooLarge",
    "PermissionDenied",
    "PayoutFailed",
    "ZeroBalance",
    # Schema
    "CATEGORY_ORDER",
    "EMPTY_ACCOUNT",
    "EMPTY_FINGERPRINT",
    "Claim",
    "ClaimCategory",
    "derive_fingerprint",
    "normalize_fingerprint",
    "parse_category",
]
