from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..core.enums import RequestStatus, RequestType
from ..loans.model import Installment
from .model import FinancialRequest


class InMemoryRequestRepository:
    """Dict-backed request store used by the container and by tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self._requests: dict[int, FinancialRequest] = {}
        self._installments: dict[int, list[Installment]] = {}

    def next_id(self) -> int:
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            return rid

    def get(self, *, request_id: int) -> Optional[FinancialRequest]:
        return self._requests.get(int(request_id))

    def save(self, request: FinancialRequest) -> None:
        with self._lock:
            self._requests[request.request_id] = request
            if request.request_id >= self._next_id:
                self._next_id = request.request_id + 1

    def list_requests(
        self,
        *,
        status: Optional[Sequence[RequestStatus]] = None,
        request_type: Optional[RequestType] = None,
        employee_id: Optional[int] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[FinancialRequest]:
        items = list(self._requests.values())
        if status is not None:
            wanted = set(status)
            items = [r for r in items if r.status in wanted]
        if request_type is not None:
            items = [r for r in items if r.request_type == request_type]
        if employee_id is not None:
            items = [r for r in items if r.subject_employee_id == int(employee_id)]
        items.sort(key=lambda r: r.request_id)
        return items if limit is None else items[:limit]

    def save_installments(self, *, loan_id: int, installments: Sequence[Installment]) -> None:
        with self._lock:
            self._installments[int(loan_id)] = list(installments)

    def get_installments(self, *, loan_id: int) -> Sequence[Installment]:
        return list(self._installments.get(int(loan_id), []))
