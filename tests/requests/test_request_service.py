from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from config import testing as settings
from finance_approvals.approvals.authorization import Identity
from finance_approvals.container import build_container
from finance_approvals.core.enums import (
    EmploymentStatus,
    InstallmentStatus,
    RequestStatus,
    RequestType,
    Role,
    ViolationCode,
)
from finance_approvals.core.exceptions import (
    Blocked,
    InvalidInstallmentState,
    NotAuthorized,
    RequestNotFound,
    ValidationFailed,
)
from finance_approvals.loans.model import EmployeeSnapshot

TODAY = date(2025, 1, 15)

EMPLOYEE = Identity(user_id=7, role=Role.EMPLOYEE, employee_id=7)
HR = Identity(user_id=20, role=Role.HR_MANAGER, employee_id=20)
FINANCE = Identity(user_id=30, role=Role.FINANCE_MANAGER, employee_id=30)
GM = Identity(user_id=50, role=Role.GENERAL_MANAGER, employee_id=50)


def _employee(**overrides) -> EmployeeSnapshot:
    values = dict(
        employee_id=7,
        monthly_salary=Decimal("10000"),
        hire_date=date(2020, 1, 1),
        employment_status=EmploymentStatus.ACTIVE,
        leave_balance_days=12,
    )
    values.update(overrides)
    return EmployeeSnapshot(**values)


def _container():
    return build_container(settings=settings, employees=[_employee()])


def _submit_loan(service, principal="12000"):
    return service.submit_loan(
        submitted_by=EMPLOYEE,
        employee_id=7,
        principal=principal,
        installment_count=12,
        first_installment_date=date(2025, 3, 1),
        today=TODAY,
    )


def _approve_all(service, request_id):
    for approver in (HR, FINANCE, GM):
        record = service.approve(approver=approver, request_id=request_id, today=TODAY)
    return record


def test_final_loan_approval_stores_schedule():
    service = _container().request_service
    loan = _submit_loan(service)

    assert service.get_schedule(loan_id=loan.request_id) == []

    approved = _approve_all(service, loan.request_id)
    schedule = service.get_schedule(loan_id=loan.request_id)

    assert approved.status == RequestStatus.APPROVED
    assert len(schedule) == 12
    assert sum(i.amount for i in schedule) == Decimal("12000")
    assert schedule[0].due_date == date(2025, 3, 1)
    assert schedule[-1].due_date == date(2026, 2, 1)


def test_second_loan_is_refused_while_first_is_outstanding():
    service = _container().request_service
    first = _submit_loan(service)
    _approve_all(service, first.request_id)

    with pytest.raises(ValidationFailed) as exc:
        _submit_loan(service, principal="3000")
    assert ViolationCode.ACTIVE_LOAN_EXISTS in exc.value.violations

    loans = service.snapshot_for(7, today=TODAY).active_loans
    assert [(l.loan_id, l.monthly_installment) for l in loans] == [(first.request_id, Decimal("1000"))]


def test_blocked_approval_stores_blocking_reason():
    container = _container()
    service = container.request_service
    loan = _submit_loan(service)

    container.directory.put(_employee(employment_status=EmploymentStatus.SUSPENDED))
    with pytest.raises(Blocked):
        service.approve(approver=HR, request_id=loan.request_id, today=TODAY)

    stored = service.get(request_id=loan.request_id)
    assert stored.blocking_reason == ViolationCode.EMPLOYEE_NOT_ACTIVE
    assert stored.status == RequestStatus.NEW

    container.directory.put(_employee())
    assert service.refresh_blocking(request_id=loan.request_id, today=TODAY).blocking_reason is None


def test_submission_on_behalf_of_others():
    service = _container().request_service
    other = Identity(user_id=8, role=Role.EMPLOYEE, employee_id=8)

    with pytest.raises(NotAuthorized):
        service.submit_leave(
            submitted_by=other,
            employee_id=7,
            leave_type="ANNUAL",
            start_date=date(2025, 2, 3),
            end_date=date(2025, 2, 5),
            reason="family",
            today=TODAY,
        )

    leave = service.submit_leave(
        submitted_by=HR,
        employee_id=7,
        leave_type="ANNUAL",
        start_date=date(2025, 2, 3),
        end_date=date(2025, 2, 5),
        reason="family",
        today=TODAY,
    )
    assert leave.request_type == RequestType.LEAVE
    assert leave.subject_employee_id == 7


def test_pending_lists_follow_the_current_level():
    service = _container().request_service
    loan = _submit_loan(service)
    order = service.submit_purchase_order(
        submitted_by=EMPLOYEE, employee_id=7, supplier_id=3, amount="450.50", description="helmets", today=TODAY
    )

    assert [r.request_id for r in service.list_pending_for(approver=HR)] == [loan.request_id]
    assert service.list_pending_for(approver=FINANCE) == []

    service.approve(approver=HR, request_id=loan.request_id, today=TODAY)
    assert [r.request_id for r in service.list_pending_for(approver=FINANCE)] == [loan.request_id]

    admin = Identity(user_id=1, role=Role.ADMIN)
    assert {r.request_id for r in service.list_pending_for(approver=admin)} == {loan.request_id, order.request_id}
    assert len(service.list_for_employee(employee_id=7)) == 2


def test_payroll_run_goes_through_finance_then_gm():
    service = _container().request_service
    run = service.submit_payroll_run(
        submitted_by=HR, employee_id=7, salary_month="2025-01", gross_amount="10000", net_amount="8700", today=TODAY
    )

    service.approve(approver=FINANCE, request_id=run.request_id, today=TODAY)
    done = service.approve(approver=GM, request_id=run.request_id, today=TODAY)

    assert done.status == RequestStatus.APPROVED
    assert done.amount == Decimal("8700")


def test_reject_and_missing_requests():
    service = _container().request_service
    loan = _submit_loan(service)

    rejected = service.reject(approver=HR, request_id=loan.request_id, reason="Too many loans", today=TODAY)
    assert rejected.status == RequestStatus.REJECTED
    assert service.get(request_id=loan.request_id).rejection_reason == "Too many loans"

    with pytest.raises(RequestNotFound):
        service.get(request_id=999)


def test_postponing_installments():
    service = _container().request_service
    loan = _submit_loan(service)

    with pytest.raises(InvalidInstallmentState):
        service.postpone_installment(actor=FINANCE, loan_id=loan.request_id, installment_no=1, new_due_date=date(2025, 4, 1))

    _approve_all(service, loan.request_id)

    with pytest.raises(NotAuthorized):
        service.postpone_installment(actor=EMPLOYEE, loan_id=loan.request_id, installment_no=1, new_due_date=date(2025, 4, 1))

    service.postpone_installment(actor=FINANCE, loan_id=loan.request_id, installment_no=1, new_due_date=date(2025, 4, 1))
    schedule = service.get_schedule(loan_id=loan.request_id)
    assert schedule[0].status == InstallmentStatus.POSTPONED
    assert schedule[0].postponed_to == date(2025, 4, 1)

    service.mass_postpone(actor=HR, loan_id=loan.request_id, from_month="2025-04", to_month="2025-06")
    schedule = service.get_schedule(loan_id=loan.request_id, today=date(2025, 5, 20))
    assert schedule[0].status == InstallmentStatus.OVERDUE
    assert schedule[1].status == InstallmentStatus.POSTPONED
    assert schedule[1].postponed_to == date(2025, 6, 1)
    assert schedule[2].status == InstallmentStatus.OVERDUE


@pytest.mark.parametrize(
    "principal,code",
    [("100.005", ViolationCode.PRINCIPAL_NOT_IN_CENTS), ("0.10", ViolationCode.PRINCIPAL_TOO_SMALL)],
)
def test_unschedulable_loan_is_refused_at_submission(principal, code):
    service = _container().request_service

    with pytest.raises(ValidationFailed) as exc:
        _submit_loan(service, principal=principal)

    assert code in exc.value.violations
    assert service.list_for_employee(employee_id=7) == []


def test_pending_limit_applies_after_filtering():
    service = _container().request_service
    for _ in range(3):
        service.submit_purchase_order(
            submitted_by=EMPLOYEE, employee_id=7, supplier_id=3, amount="80", description="tools", today=TODAY
        )
    loan = _submit_loan(service)

    assert [r.request_id for r in service.list_pending_for(approver=HR, limit=2)] == [loan.request_id]
