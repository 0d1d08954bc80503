from __future__ import annotations

from datetime import date, time
from decimal import Decimal

from config import testing as settings
from finance_approvals.approvals.authorization import Identity
from finance_approvals.approvals.bulk import BulkApprovalCoordinator
from finance_approvals.container import build_container
from finance_approvals.core.enums import EmploymentStatus, ErrorKind, RequestStatus, Role
from finance_approvals.loans.model import EmployeeSnapshot

TODAY = date(2025, 1, 15)
HR = Identity(user_id=20, role=Role.HR_MANAGER, employee_id=20)


def _container(count: int = 3):
    employees = [
        EmployeeSnapshot(
            employee_id=emp_id,
            monthly_salary=Decimal("9000"),
            hire_date=date(2021, 6, 1),
            employment_status=EmploymentStatus.ACTIVE,
        )
        for emp_id in range(1, count + 1)
    ]
    container = build_container(settings=settings, employees=employees)
    for emp_id in range(1, count + 1):
        container.request_service.submit_manual_attendance(
            submitted_by=Identity(user_id=emp_id, role=Role.EMPLOYEE, employee_id=emp_id),
            employee_id=emp_id,
            attendance_date=date(2025, 1, 10),
            entry_time=time(8, 0),
            exit_time=time(17, 0),
            reason="badge reader down",
            today=TODAY,
        )
    return container


class StopAfter:
    """Event stand-in that reports set after a number of checks."""

    def __init__(self, checks: int):
        self._checks = checks

    def is_set(self) -> bool:
        self._checks -= 1
        return self._checks < 0


def test_already_approved_request_fails_alone():
    container = _container()
    container.request_service.approve(approver=HR, request_id=3, today=TODAY)

    result = container.bulk_coordinator.bulk_approve([1, 2, 3], approver=HR, today=TODAY)

    assert result.succeeded == [1, 2]
    assert [(f.request_id, f.kind) for f in result.failed] == [(3, ErrorKind.INVALID_STATE_TRANSITION)]
    assert not result.all_succeeded
    for rid in (1, 2, 3):
        assert container.request_service.get(request_id=rid).status == RequestStatus.APPROVED


def test_duplicates_are_processed_once_in_order():
    container = _container()

    result = container.bulk_coordinator.bulk_approve([2, 1, 2], approver=HR, today=TODAY)

    assert result.succeeded == [2, 1]
    assert result.failed == []
    assert result.all_succeeded


def test_unknown_and_unauthorized_ids_are_recorded():
    container = _container(count=1)
    finance = Identity(user_id=30, role=Role.FINANCE_MANAGER, employee_id=30)

    result = container.bulk_coordinator.bulk_approve([1, 42], approver=finance, today=TODAY)

    assert result.succeeded == []
    assert result.failure_for(1).kind == ErrorKind.NOT_AUTHORIZED
    assert result.failure_for(42).kind == ErrorKind.NOT_FOUND


def test_stop_is_honoured_between_items():
    container = _container()

    result = container.bulk_coordinator.bulk_approve([1, 2, 3], approver=HR, today=TODAY, stop=StopAfter(1))

    assert result.succeeded == [1]
    assert result.skipped == [2, 3]
    assert container.request_service.get(request_id=2).status == RequestStatus.NEW


def test_bulk_reject_with_reason():
    container = _container()

    result = container.bulk_coordinator.bulk_reject([1, 3], approver=HR, reason="Duplicate entry", today=TODAY)

    assert result.succeeded == [1, 3]
    assert container.request_service.get(request_id=3).rejection_reason == "Duplicate entry"
    assert container.request_service.get(request_id=2).status == RequestStatus.NEW


class ExplodingService:
    def approve(self, *, approver, request_id, today, notes=""):
        if request_id == 2:
            raise RuntimeError("connection lost")

    def reject(self, *, approver, request_id, reason, today):
        raise AssertionError("not used")


def test_unexpected_errors_are_internal_failures():
    coordinator = BulkApprovalCoordinator(ExplodingService())

    result = coordinator.bulk_approve([1, 2, 3], approver=HR, today=TODAY)

    assert result.succeeded == [1, 3]
    assert result.failure_for(2).kind == ErrorKind.INTERNAL
    assert "connection lost" in result.failure_for(2).message
