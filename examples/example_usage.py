"""Example: drive the engine through the service layer (no web framework).

Submits a loan, walks it through the configured chain and prints the
installment schedule, then bulk-approves a few manual attendance fixes.
"""

from datetime import date, time
from decimal import Decimal

from finance_approvals.approvals.authorization import Identity
from finance_approvals.core.enums import EmploymentStatus, Role
from finance_approvals.loans.model import EmployeeSnapshot
from finance_approvals.main import create_engine


def main():
    employees = [
        EmployeeSnapshot(
            employee_id=emp_id,
            monthly_salary=Decimal("10000"),
            hire_date=date(2020, 1, 1),
            employment_status=EmploymentStatus.ACTIVE,
        )
        for emp_id in (7, 8, 9)
    ]
    container = create_engine(employees)
    service = container.request_service
    today = date(2025, 1, 15)

    employee = Identity(user_id=7, role=Role.EMPLOYEE, employee_id=7)
    loan = service.submit_loan(
        submitted_by=employee,
        employee_id=7,
        principal="1000",
        installment_count=3,
        first_installment_date=date(2025, 3, 31),
        today=today,
    )
    for role, emp_id in ((Role.HR_MANAGER, 20), (Role.FINANCE_MANAGER, 30), (Role.GENERAL_MANAGER, 50)):
        loan = service.approve(approver=Identity(user_id=emp_id, role=role, employee_id=emp_id), request_id=loan.request_id, today=today)
    print(loan.status.value, loan.approved_date)
    for installment in service.get_schedule(loan_id=loan.request_id):
        print(installment.installment_no, installment.due_date, installment.amount)

    ids = []
    for emp_id in (8, 9):
        request = service.submit_manual_attendance(
            submitted_by=Identity(user_id=emp_id, role=Role.EMPLOYEE, employee_id=emp_id),
            employee_id=emp_id,
            attendance_date=date(2025, 1, 14),
            entry_time=time(8, 0),
            exit_time=time(17, 0),
            reason="badge reader down",
            today=today,
        )
        ids.append(request.request_id)
    result = container.bulk_coordinator.bulk_approve(
        ids, approver=Identity(user_id=20, role=Role.HR_MANAGER, employee_id=20), today=today
    )
    print("succeeded:", result.succeeded, "failed:", result.failed)


if __name__ == "__main__":
    main()
