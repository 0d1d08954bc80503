from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, RequestType
from ..loans.model import Installment
from .model import FinancialRequest


class RequestRepository(Protocol):
    """Persistence collaborator.

    Implementations own per-request concurrency control (for example
    optimistic versioning); the engine itself never locks.
    """

    def next_id(self) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[FinancialRequest]:
        raise NotImplementedError

    def save(self, request: FinancialRequest) -> None:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[Sequence[RequestStatus]] = None,
        request_type: Optional[RequestType] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[FinancialRequest]:
        raise NotImplementedError

    # Loan installments
    def save_installments(self, *, loan_id: int, installments: Sequence[Installment]) -> None:
        raise NotImplementedError

    def get_installments(self, *, loan_id: int) -> Sequence[Installment]:
        raise NotImplementedError
