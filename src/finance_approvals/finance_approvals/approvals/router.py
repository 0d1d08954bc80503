from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.validators import clean_note, require_rejection_reason
from ..core.enums import ApprovalAction, RequestStatus, ViolationCode
from ..core.exceptions import Blocked, InvalidStateTransition, MissingApprover, ValidationFailed
from ..loans.eligibility import EligibilityValidator
from ..loans.model import EmployeeSnapshot
from ..requests.model import ApprovalStep, FinancialRequest
from .authorization import Identity, ensure_can_act
from .chain import ApprovalChainProvider, ApprovalLevelChain

# The only valid status transitions. Terminal states have no outgoing edges.
ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.NEW: frozenset({RequestStatus.INPROCESS, RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.INPROCESS: frozenset({RequestStatus.INPROCESS, RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


class ApprovalRouter:
    """State machine for the request lifecycle.

    NEW -> INPROCESS* -> APPROVED | REJECTED. Every method is pure: it
    returns a new record and never touches the one it was given, so a
    failed call leaves the caller's record exactly as it was.
    """

    def __init__(self, chains: ApprovalChainProvider, validator: EligibilityValidator):
        self._chains = chains
        self._validator = validator

    def chain_for(self, request: FinancialRequest) -> ApprovalLevelChain:
        chain = self._chains.chain_for(
            request.request_type,
            department_id=request.department_id,
            project_id=request.project_id,
        )
        if chain is None or len(chain) == 0:
            raise MissingApprover(f"No approval chain configured for {request.request_type.value}")
        return chain

    def submit(
        self,
        request: FinancialRequest,
        *,
        submitted_by: Identity,
        snapshot: Optional[EmployeeSnapshot],
        today: date,
    ) -> FinancialRequest:
        if request.current_level != 0 or request.status != RequestStatus.NEW:
            raise InvalidStateTransition(request.status, "submit")

        violations = self._validator.validate(request, snapshot, today=today)
        if violations:
            raise ValidationFailed(violations)

        chain = self.chain_for(request)
        step = ApprovalStep(
            level=0,
            level_name=None,
            action=ApprovalAction.SUBMIT,
            actor_id=submitted_by.employee_id,
            actor_role=submitted_by.role,
            decided_on=today,
            system=submitted_by.is_system_approver,
        )
        return replace(
            request,
            status=RequestStatus.NEW,
            current_level=1,
            next_approver=chain.level(1),
            blocking_reason=None,
            request_date=request.request_date or today,
            history=request.history + (step,),
        )

    def blocking_violations(
        self,
        request: FinancialRequest,
        *,
        snapshot: Optional[EmployeeSnapshot],
        today: date,
    ) -> list[ViolationCode]:
        return self._validator.validate(request, snapshot, today=today)

    def refresh_blocking(
        self,
        request: FinancialRequest,
        *,
        snapshot: Optional[EmployeeSnapshot],
        today: date,
    ) -> FinancialRequest:
        """Re-derive ``blocking_reason`` from the current snapshot without changing status."""
        if request.is_terminal:
            return request
        violations = self.blocking_violations(request, snapshot=snapshot, today=today)
        return replace(request, blocking_reason=violations[0] if violations else None)

    def approve(
        self,
        request: FinancialRequest,
        *,
        approver: Identity,
        today: date,
        snapshot: Optional[EmployeeSnapshot] = None,
        notes: str = "",
    ) -> FinancialRequest:
        descriptor = self._open_level(request, "approve")
        ensure_can_act(approver, descriptor)

        # Salary, service and loan data may have changed since submission.
        violations = self.blocking_violations(request, snapshot=snapshot, today=today)
        if violations:
            refreshed = replace(request, blocking_reason=violations[0])
            raise Blocked(violations[0], violations=violations, request=refreshed)

        chain = self.chain_for(request)
        history = request.history + (
            ApprovalStep(
                level=request.current_level,
                level_name=descriptor.level_name,
                action=ApprovalAction.APPROVE,
                actor_id=approver.employee_id,
                actor_role=approver.role,
                decided_on=today,
                notes=clean_note(notes),
                system=approver.is_system_approver,
            ),
        )

        if request.current_level >= len(chain):
            _check_transition(request.status, RequestStatus.APPROVED, "approve")
            return replace(
                request,
                status=RequestStatus.APPROVED,
                next_approver=None,
                blocking_reason=None,
                approved_date=today,
                approver_id=approver.employee_id,
                decided_by_system=approver.is_system_approver,
                history=history,
            )

        _check_transition(request.status, RequestStatus.INPROCESS, "approve")
        next_level = request.current_level + 1
        return replace(
            request,
            status=RequestStatus.INPROCESS,
            current_level=next_level,
            next_approver=chain.level(next_level),
            blocking_reason=None,
            history=history,
        )

    def reject(
        self,
        request: FinancialRequest,
        *,
        approver: Identity,
        reason: str,
        today: date,
    ) -> FinancialRequest:
        descriptor = self._open_level(request, "reject")
        reason = require_rejection_reason(reason)
        ensure_can_act(approver, descriptor)

        _check_transition(request.status, RequestStatus.REJECTED, "reject")
        step = ApprovalStep(
            level=request.current_level,
            level_name=descriptor.level_name,
            action=ApprovalAction.REJECT,
            actor_id=approver.employee_id,
            actor_role=approver.role,
            decided_on=today,
            notes=reason,
            system=approver.is_system_approver,
        )
        return replace(
            request,
            status=RequestStatus.REJECTED,
            next_approver=None,
            rejection_reason=reason,
            approver_id=approver.employee_id,
            decided_by_system=approver.is_system_approver,
            history=request.history + (step,),
        )

    @staticmethod
    def _open_level(request: FinancialRequest, op: str):
        if request.is_terminal:
            raise InvalidStateTransition(request.status, op)
        if request.current_level < 1 or request.next_approver is None:
            raise MissingApprover(f"Request {request.request_id} has not been submitted for approval")
        return request.next_approver


def _check_transition(current: RequestStatus, target: RequestStatus, op: str) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStateTransition(current, op)
