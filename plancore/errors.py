"""Structural error taxonomy for plan mutations.

Every error carries a stable ``code`` so RPC-style callers can map it to a
response without string matching. Snapshots are immutable, so a raised
error never leaves a half-applied change behind.
"""

from __future__ import annotations


class PlanError(ValueError):
    code = "plan_error"

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": str(self)}


class CapacityExceeded(PlanError):
    code = "capacity_exceeded"


class InvalidPermutation(PlanError):
    code = "invalid_permutation"


class IncompatibleTarget(PlanError):
    code = "incompatible_target"


class NotFound(PlanError):
    code = "not_found"


class EmptyClipboard(PlanError):
    code = "empty_clipboard"


class DuplicateEntity(PlanError):
    code = "duplicate_entity"


class InvalidValue(PlanError):
    code = "invalid_value"


class InvalidTransition(PlanError):
    code = "invalid_transition"
