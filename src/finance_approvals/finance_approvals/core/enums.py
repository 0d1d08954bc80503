from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles that can take part in an approval chain."""

    ADMIN = "ADMIN"
    GENERAL_MANAGER = "GENERAL_MANAGER"
    HR_MANAGER = "HR_MANAGER"
    FINANCE_MANAGER = "FINANCE_MANAGER"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    REGIONAL_PROJECT_MANAGER = "REGIONAL_PROJECT_MANAGER"
    PROJECT_SECRETARY = "PROJECT_SECRETARY"
    PROJECT_ADVISOR = "PROJECT_ADVISOR"
    WAREHOUSE_MANAGER = "WAREHOUSE_MANAGER"
    EMPLOYEE = "EMPLOYEE"


class RequestType(str, Enum):
    LEAVE = "LEAVE"
    LOAN = "LOAN"
    PAYROLL_RUN = "PAYROLL_RUN"
    MANUAL_ATTENDANCE = "MANUAL_ATTENDANCE"
    PURCHASE_ORDER = "PURCHASE_ORDER"


class RequestStatus(str, Enum):
    """Closed status codes exchanged with the presentation layer."""

    NEW = "NEW"
    INPROCESS = "INPROCESS"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})


class ApprovalAction(str, Enum):
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    POSTPONED = "POSTPONED"


class EmploymentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class ViolationCode(str, Enum):
    """Stable eligibility rule codes; localized only at the presentation boundary."""

    SNAPSHOT_MISSING = "SNAPSHOT_MISSING"
    SNAPSHOT_MISMATCH = "SNAPSHOT_MISMATCH"
    EMPLOYEE_NOT_ACTIVE = "EMPLOYEE_NOT_ACTIVE"

    # Loans
    PRINCIPAL_NOT_POSITIVE = "PRINCIPAL_NOT_POSITIVE"
    PRINCIPAL_NOT_IN_CENTS = "PRINCIPAL_NOT_IN_CENTS"
    PRINCIPAL_EXCEEDS_CAP = "PRINCIPAL_EXCEEDS_CAP"
    PRINCIPAL_TOO_SMALL = "PRINCIPAL_TOO_SMALL"
    INSTALLMENT_COUNT_TOO_LOW = "INSTALLMENT_COUNT_TOO_LOW"
    INSTALLMENT_COUNT_TOO_HIGH = "INSTALLMENT_COUNT_TOO_HIGH"
    FIRST_INSTALLMENT_TOO_SOON = "FIRST_INSTALLMENT_TOO_SOON"
    ACTIVE_LOAN_EXISTS = "ACTIVE_LOAN_EXISTS"
    INSUFFICIENT_SERVICE = "INSUFFICIENT_SERVICE"
    MONTHLY_DEDUCTION_EXCEEDS_CAP = "MONTHLY_DEDUCTION_EXCEEDS_CAP"

    # Leave
    LEAVE_END_BEFORE_START = "LEAVE_END_BEFORE_START"
    LEAVE_EXCEEDS_BALANCE = "LEAVE_EXCEEDS_BALANCE"

    # Manual attendance
    EXIT_BEFORE_ENTRY = "EXIT_BEFORE_ENTRY"
    ATTENDANCE_DATE_IN_FUTURE = "ATTENDANCE_DATE_IN_FUTURE"

    # Payroll runs / purchase orders
    AMOUNT_NOT_POSITIVE = "AMOUNT_NOT_POSITIVE"


class ErrorKind(str, Enum):
    """Error codes attached to failed operations (and to bulk result slots)."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    BLOCKED = "BLOCKED"
    INVALID_REJECTION_REASON = "INVALID_REJECTION_REASON"
    MISSING_APPROVER = "MISSING_APPROVER"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_INSTALLMENT_STATE = "INVALID_INSTALLMENT_STATE"
    ROUNDING_INVARIANT_VIOLATION = "ROUNDING_INVARIANT_VIOLATION"
    INTERNAL = "INTERNAL"
