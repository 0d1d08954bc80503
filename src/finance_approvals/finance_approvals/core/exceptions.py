from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .enums import ErrorKind, RequestStatus, ViolationCode

if TYPE_CHECKING:
    from ..requests.model import FinancialRequest


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.INTERNAL


class ValidationFailed(DomainError):
    """Raised with the complete list of violated eligibility rules."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, violations: Sequence[ViolationCode]):
        self.violations = list(violations)
        super().__init__("Validation failed: " + ", ".join(v.value for v in self.violations))


class InvalidStateTransition(DomainError):
    kind = ErrorKind.INVALID_STATE_TRANSITION

    def __init__(self, from_status: RequestStatus, attempted_op: str):
        self.from_status = from_status
        self.attempted_op = attempted_op
        super().__init__(f"Cannot {attempted_op} a request in status {from_status.value}")


class Blocked(DomainError):
    """Raised when a currently failing eligibility rule disables approval.

    ``request`` is the record with ``blocking_reason`` re-derived, so callers
    can store it before reporting the error.
    """

    kind = ErrorKind.BLOCKED

    def __init__(
        self,
        blocking_reason: ViolationCode,
        *,
        violations: Optional[Sequence[ViolationCode]] = None,
        request: Optional["FinancialRequest"] = None,
    ):
        self.blocking_reason = blocking_reason
        self.violations = list(violations or [blocking_reason])
        self.request = request
        super().__init__(f"Approval blocked: {blocking_reason.value}")


class InvalidRejectionReason(DomainError):
    kind = ErrorKind.INVALID_REJECTION_REASON

    def __init__(self, message: str = "A rejection reason is required"):
        super().__init__(message)


class MissingApprover(DomainError):
    """Raised when no approver can be resolved or the acting identity has no approver record."""

    kind = ErrorKind.MISSING_APPROVER


class NotAuthorized(DomainError):
    """Raised when an identity is not allowed to act on a request."""

    kind = ErrorKind.NOT_AUTHORIZED


class RequestNotFound(DomainError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, request_id: int):
        self.request_id = request_id
        super().__init__(f"Request {request_id} does not exist")


class InvalidInstallmentState(DomainError):
    kind = ErrorKind.INVALID_INSTALLMENT_STATE


class RoundingInvariantViolation(DomainError):
    """Internal assertion: a generated schedule does not sum to its principal."""

    kind = ErrorKind.ROUNDING_INVARIANT_VIOLATION
