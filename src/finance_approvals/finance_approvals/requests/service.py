from __future__ import annotations

from dataclasses import replace
from datetime import date, time
from typing import Optional, Sequence

from loguru import logger

from ..approvals.authorization import (
    Identity,
    can_act,
    ensure_can_manage_installments,
    ensure_can_submit_for,
)
from ..approvals.router import ApprovalRouter
from ..common.logger import log_audit
from ..common.money import Number, to_decimal
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, RequestType
from ..core.exceptions import Blocked, InvalidInstallmentState, RequestNotFound
from ..loans.directory import EmployeeDirectory
from ..loans.model import ActiveLoan, EmployeeSnapshot, Installment
from ..loans.scheduler import InstallmentScheduler
from .model import (
    FinancialRequest,
    LeaveDetails,
    LoanDetails,
    ManualAttendanceDetails,
    PayrollRunDetails,
    PurchaseOrderDetails,
    RequestDetails,
)
from .repository import RequestRepository

OPEN_STATUSES = (RequestStatus.NEW, RequestStatus.INPROCESS)


class RequestService:
    """Use cases the presentation layer calls: submit, decide, query, reschedule."""

    def __init__(
        self,
        requests: RequestRepository,
        directory: EmployeeDirectory,
        router: ApprovalRouter,
        *,
        scheduler: Optional[InstallmentScheduler] = None,
    ):
        self._requests = requests
        self._directory = directory
        self._router = router
        self._scheduler = scheduler or InstallmentScheduler()

    # Snapshots

    def snapshot_for(self, employee_id: int, *, today: date) -> Optional[EmployeeSnapshot]:
        """Directory snapshot merged with the loans this engine has approved itself."""
        snapshot = self._directory.get_snapshot(int(employee_id), today=today)
        if snapshot is None:
            return None

        loans = {loan.loan_id: loan for loan in snapshot.active_loans}
        approved = self._requests.list_requests(
            status=[RequestStatus.APPROVED],
            request_type=RequestType.LOAN,
            employee_id=int(employee_id),
            limit=DEFAULT_LIST_LIMIT,
        )
        for record in approved:
            installments = self._requests.get_installments(loan_id=record.request_id)
            if not installments:
                continue
            loans[record.request_id] = ActiveLoan(
                loan_id=record.request_id,
                monthly_installment=installments[0].amount,
                remaining_balance=self._scheduler.remaining_balance(installments),
            )
        return replace(snapshot, active_loans=tuple(loans.values()))

    # Submission

    def _submit(
        self,
        *,
        submitted_by: Identity,
        request_type: RequestType,
        employee_id: int,
        details: RequestDetails,
        today: date,
        department_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> FinancialRequest:
        ensure_can_submit_for(submitted_by, employee_id)

        draft = FinancialRequest(
            request_id=self._requests.next_id(),
            request_type=request_type,
            subject_employee_id=int(employee_id),
            details=details,
            department_id=department_id,
            project_id=project_id,
        )
        snapshot = self.snapshot_for(employee_id, today=today)
        record = self._router.submit(draft, submitted_by=submitted_by, snapshot=snapshot, today=today)
        self._requests.save(record)

        logger.info(
            f"{request_type.value} request {record.request_id} submitted for employee {employee_id}; "
            f"next level {record.next_level_name}"
        )
        log_audit(submitted_by.audit_name, "SUBMIT", f"{request_type.value} #{record.request_id}")
        return record

    def submit_leave(
        self,
        *,
        submitted_by: Identity,
        employee_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
        today: date,
        department_id: Optional[int] = None,
    ) -> FinancialRequest:
        details = LeaveDetails(leave_type=leave_type, start_date=start_date, end_date=end_date, reason=reason)
        return self._submit(
            submitted_by=submitted_by,
            request_type=RequestType.LEAVE,
            employee_id=employee_id,
            details=details,
            today=today,
            department_id=department_id,
        )

    def submit_loan(
        self,
        *,
        submitted_by: Identity,
        employee_id: int,
        principal: Number,
        installment_count: int,
        first_installment_date: date,
        today: date,
        reason: Optional[str] = None,
        department_id: Optional[int] = None,
    ) -> FinancialRequest:
        details = LoanDetails(
            principal=to_decimal(principal),
            installment_count=int(installment_count),
            first_installment_date=first_installment_date,
            reason=reason,
        )
        return self._submit(
            submitted_by=submitted_by,
            request_type=RequestType.LOAN,
            employee_id=employee_id,
            details=details,
            today=today,
            department_id=department_id,
        )

    def submit_payroll_run(
        self,
        *,
        submitted_by: Identity,
        employee_id: int,
        salary_month: str,
        gross_amount: Number,
        net_amount: Number,
        today: date,
        department_id: Optional[int] = None,
    ) -> FinancialRequest:
        details = PayrollRunDetails(
            salary_month=salary_month,
            gross_amount=to_decimal(gross_amount),
            net_amount=to_decimal(net_amount),
        )
        return self._submit(
            submitted_by=submitted_by,
            request_type=RequestType.PAYROLL_RUN,
            employee_id=employee_id,
            details=details,
            today=today,
            department_id=department_id,
        )

    def submit_manual_attendance(
        self,
        *,
        submitted_by: Identity,
        employee_id: int,
        attendance_date: date,
        entry_time: time,
        exit_time: time,
        reason: str,
        today: date,
        department_id: Optional[int] = None,
    ) -> FinancialRequest:
        details = ManualAttendanceDetails(
            attendance_date=attendance_date,
            entry_time=entry_time,
            exit_time=exit_time,
            reason=reason,
        )
        return self._submit(
            submitted_by=submitted_by,
            request_type=RequestType.MANUAL_ATTENDANCE,
            employee_id=employee_id,
            details=details,
            today=today,
            department_id=department_id,
        )

    def submit_purchase_order(
        self,
        *,
        submitted_by: Identity,
        employee_id: int,
        supplier_id: int,
        amount: Number,
        description: str,
        today: date,
        project_id: Optional[int] = None,
        department_id: Optional[int] = None,
    ) -> FinancialRequest:
        details = PurchaseOrderDetails(supplier_id=int(supplier_id), amount=to_decimal(amount), description=description)
        return self._submit(
            submitted_by=submitted_by,
            request_type=RequestType.PURCHASE_ORDER,
            employee_id=employee_id,
            details=details,
            today=today,
            department_id=department_id,
            project_id=project_id,
        )

    # Decisions

    def get(self, *, request_id: int) -> FinancialRequest:
        record = self._requests.get(request_id=int(request_id))
        if record is None:
            raise RequestNotFound(int(request_id))
        return record

    def approve(self, *, approver: Identity, request_id: int, today: date, notes: str = "") -> FinancialRequest:
        record = self.get(request_id=request_id)
        snapshot = self.snapshot_for(record.subject_employee_id, today=today)
        try:
            updated = self._router.approve(record, approver=approver, today=today, snapshot=snapshot, notes=notes)
        except Blocked as exc:
            if exc.request is not None and exc.request != record:
                self._requests.save(exc.request)
            logger.warning(f"Approval of request {record.request_id} blocked: {exc.blocking_reason.value}")
            raise

        if updated.status == RequestStatus.APPROVED and updated.request_type == RequestType.LOAN:
            self._create_schedule(updated)
        self._requests.save(updated)

        logger.info(
            f"Request {updated.request_id} approved at level {record.current_level} by {approver.audit_name}; "
            f"status {updated.status.value}"
        )
        log_audit(approver.audit_name, "APPROVE", f"{updated.request_type.value} #{updated.request_id}")
        return updated

    def reject(self, *, approver: Identity, request_id: int, reason: str, today: date) -> FinancialRequest:
        record = self.get(request_id=request_id)
        updated = self._router.reject(record, approver=approver, reason=reason, today=today)
        self._requests.save(updated)

        logger.info(f"Request {updated.request_id} rejected at level {record.current_level} by {approver.audit_name}")
        log_audit(approver.audit_name, "REJECT", f"{updated.request_type.value} #{updated.request_id}")
        return updated

    def refresh_blocking(self, *, request_id: int, today: date) -> FinancialRequest:
        record = self.get(request_id=request_id)
        snapshot = self.snapshot_for(record.subject_employee_id, today=today)
        refreshed = self._router.refresh_blocking(record, snapshot=snapshot, today=today)
        if refreshed != record:
            self._requests.save(refreshed)
        return refreshed

    # Queries

    def list_pending_for(self, *, approver: Identity, limit: int = DEFAULT_LIST_LIMIT) -> list[FinancialRequest]:
        pending = self._requests.list_requests(status=list(OPEN_STATUSES), limit=None)
        mine = [r for r in pending if r.next_approver is not None and can_act(approver, r.next_approver)]
        return mine[:limit]

    def list_for_employee(self, *, employee_id: int, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[FinancialRequest]:
        return self._requests.list_requests(employee_id=int(employee_id), limit=limit)

    # Loan installments

    def _create_schedule(self, loan: FinancialRequest) -> list[Installment]:
        details = loan.details
        assert isinstance(details, LoanDetails)
        installments = self._scheduler.generate_schedule(
            details.principal,
            details.installment_count,
            details.first_installment_date,
            loan_id=loan.request_id,
        )
        self._requests.save_installments(loan_id=loan.request_id, installments=installments)
        logger.info(
            f"Loan {loan.request_id}: {len(installments)} installments scheduled from "
            f"{details.first_installment_date.isoformat()}"
        )
        return installments

    def get_schedule(self, *, loan_id: int, today: Optional[date] = None) -> list[Installment]:
        installments = list(self._requests.get_installments(loan_id=int(loan_id)))
        if today is not None:
            installments = self._scheduler.mark_overdue(installments, today=today)
        return installments

    def _approved_installments(self, loan_id: int) -> list[Installment]:
        loan = self.get(request_id=loan_id)
        if loan.request_type != RequestType.LOAN or loan.status != RequestStatus.APPROVED:
            raise InvalidInstallmentState(f"Request {loan_id} is not an approved loan")
        return list(self._requests.get_installments(loan_id=loan.request_id))

    def postpone_installment(
        self,
        *,
        actor: Identity,
        loan_id: int,
        installment_no: int,
        new_due_date: date,
    ) -> list[Installment]:
        ensure_can_manage_installments(actor)
        installments = self._scheduler.postpone(
            self._approved_installments(loan_id),
            installment_no=installment_no,
            new_due_date=new_due_date,
        )
        self._requests.save_installments(loan_id=int(loan_id), installments=installments)

        logger.info(f"Loan {loan_id}: installment {installment_no} postponed to {new_due_date.isoformat()}")
        log_audit(actor.audit_name, "POSTPONE", f"loan #{loan_id} installment {installment_no} -> {new_due_date}")
        return installments

    def mass_postpone(self, *, actor: Identity, loan_id: int, from_month: str, to_month: str) -> list[Installment]:
        ensure_can_manage_installments(actor)
        before = self._approved_installments(loan_id)
        installments = self._scheduler.postpone_month(before, from_month=from_month, to_month=to_month)
        moved = sum(1 for old, new in zip(before, installments) if old is not new)
        if moved:
            self._requests.save_installments(loan_id=int(loan_id), installments=installments)
        else:
            logger.warning(f"Loan {loan_id}: no open installments due in {from_month}")

        log_audit(actor.audit_name, "MASS_POSTPONE", f"loan #{loan_id} {from_month} -> {to_month} ({moved})")
        return installments
