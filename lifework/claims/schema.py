"""Claim schema for the Life & Work registry.

A claim is a self-asserted attestation about an account's life or work.
Identity is the fingerprint: SHA-256 of (claimant, content) for the four
keyword categories, or a caller-supplied file hash for intellectual
property. Once stored, only `visible` and the endorser list may change.

Category codes are stable and double as the "found" tag on lookups:
a record with category UNSET is the not-found sentinel.
"""

from __future__ import annotations

import hashlib
import re
from enum import Enum

from pydantic import BaseModel, Field, field_validator

FINGERPRINT_HEX_LEN = 64
EMPTY_FINGERPRINT = "0" * FINGERPRINT_HEX_LEN
EMPTY_ACCOUNT = "0" * 48

_HEX_RE = re.compile(r"^[0-9a-f]{64}$")


# ── Enums ────────────────────────────────────────────────────────────


class ClaimCategory(int, Enum):
    UNSET = 0
    WORK_HISTORY = 1
    EDUCATION = 2
    EXPERTISE = 3
    GOOD_DEED = 4
    INTELLECTUAL_PROPERTY = 5

    @property
    def event_name(self) -> str:
        return CLAIM_EVENT_NAMES[self]


# Resume and verification order
CATEGORY_ORDER: tuple[ClaimCategory, ...] = (
    ClaimCategory.WORK_HISTORY,
    ClaimCategory.EDUCATION,
    ClaimCategory.EXPERTISE,
    ClaimCategory.GOOD_DEED,
    ClaimCategory.INTELLECTUAL_PROPERTY,
)

KEYWORD_CATEGORIES = frozenset(CATEGORY_ORDER[:4])

CLAIM_EVENT_NAMES: dict[ClaimCategory, str] = {
    ClaimCategory.UNSET: "",
    ClaimCategory.WORK_HISTORY: "ClaimMadeWorkHistory",
    ClaimCategory.EDUCATION: "ClaimMadeEducation",
    ClaimCategory.EXPERTISE: "ClaimMadeExpertise",
    ClaimCategory.GOOD_DEED: "ClaimMadeGoodDeed",
    ClaimCategory.INTELLECTUAL_PROPERTY: "ClaimMadeIntellectualProperty",
}

ENDORSED_EVENT = "ClaimEndorsed"
REWARD_EVENT = "RewardPaid"


def parse_category(value: ClaimCategory | str | int) -> ClaimCategory:
    """Accept an enum member, its code, or a name like "work_history"."""
    if isinstance(value, ClaimCategory):
        return value
    if isinstance(value, int):
        return ClaimCategory(value)
    key = value.strip().upper().replace("-", "_")
    try:
        return ClaimCategory[key]
    except KeyError:
        raise ValueError(f"Unknown claim category: {value!r}") from None


# ── Fingerprints ─────────────────────────────────────────────────────


def normalize_fingerprint(value: str | bytes) -> str:
    """Return a fingerprint as 64 lowercase hex chars.

    Accepts raw 32-byte digests or hex strings (optional 0x prefix).
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 32:
            raise ValueError(f"Fingerprint must be 32 bytes, got {len(value)}")
        return bytes(value).hex()
    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not _HEX_RE.match(text):
        raise ValueError(f"Fingerprint must be 64 hex chars: {value!r}")
    return text


def derive_fingerprint(claimant: str, content: bytes) -> str:
    """SHA-256 over the length-prefixed claimant followed by the content.

    The prefix keeps (claimant, content) pairs unambiguous, so the same
    text from two accounts never collides and the same account cannot
    store byte-identical content twice.
    """
    account = claimant.encode("utf-8")
    digest = hashlib.sha256()
    digest.update(len(account).to_bytes(4, "big"))
    digest.update(account)
    digest.update(content)
    return digest.hexdigest()


def decode_text(data: bytes) -> str:
    """UTF-8 decode, empty string on failure."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return ""


# ── Claim record ─────────────────────────────────────────────────────


class Claim(BaseModel):
    """A stored claim. Defaults describe the not-found sentinel."""

    category: ClaimCategory = ClaimCategory.UNSET
    claimant: str = EMPTY_ACCOUNT
    content: bytes = b""
    fingerprint: str = EMPTY_FINGERPRINT
    endorser_count: int = 0
    reference_link: bytes = b""
    visible: bool = True
    endorsers: list[str] = Field(default_factory=list)

    @field_validator("fingerprint")
    @classmethod
    def _fingerprint_hex(cls, v: str) -> str:
        return normalize_fingerprint(v)

    @property
    def exists(self) -> bool:
        return self.category is not ClaimCategory.UNSET

    @property
    def text(self) -> str:
        return decode_text(self.content)

    @classmethod
    def sentinel(cls) -> "Claim":
        return cls()

    @classmethod
    def create(
        cls,
        category: ClaimCategory,
        claimant: str,
        content: bytes,
        reference_link: bytes,
        fingerprint: str,
    ) -> "Claim":
        """New claim: claimant is the first endorser but is not counted."""
        return cls(
            category=category,
            claimant=claimant,
            content=content,
            fingerprint=fingerprint,
            endorser_count=0,
            reference_link=reference_link,
            visible=True,
            endorsers=[claimant],
        )

    def has_endorser(self, account: str) -> bool:
        return account in self.endorsers

    def add_endorser(self, account: str) -> None:
        """Append a third-party endorser. Leaves every other field alone."""
        self.endorsers.append(account)
        self.endorser_count += 1

    def to_summary(self) -> dict:
        """JSON-friendly view for CLI output and exports."""
        return {
            "category": self.category.name,
            "claimant": self.claimant,
            "content": self.text,
            "fingerprint": self.fingerprint,
            "endorser_count": self.endorser_count,
            "reference_link": decode_text(self.reference_link),
            "visible": self.visible,
            "endorsers": list(self.endorsers),
        }
