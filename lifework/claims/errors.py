"""Registry error taxonomy.

Every failing message raises one of these. The enclosing transaction is
rolled back before the exception reaches the caller, so nothing the
message wrote survives.
"""

from __future__ import annotations


class RegistryError(Exception):
    code = "RegistryError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"status": "ERROR", "error": self.code, "message": self.message}


class DuplicateClaim(RegistryError):
    code = "DuplicateClaim"


class NonexistentClaim(RegistryError):
    code = "NonexistentClaim"


class DuplicateEndorsement(RegistryError):
    code = "DuplicateEndorsement"


class CallerNotOwner(RegistryError):
    code = "CallerNotOwner"


class DataTooLarge(RegistryError):
    """Capacity or storage-size limit reached."""

    code = "DataTooLarge"


class PermissionDenied(RegistryError):
    """Non-root caller on a root-only reward operation."""

    code = "PermissionDenied"


class PayoutFailed(RegistryError):
    code = "PayoutFailed"


class ZeroBalance(RegistryError):
    code = "ZeroBalance"
