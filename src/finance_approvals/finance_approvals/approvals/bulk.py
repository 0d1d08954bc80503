from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, Optional

from loguru import logger

from ..core.enums import ErrorKind
from ..core.exceptions import DomainError
from ..requests.service import RequestService
from .authorization import Identity


@dataclass(frozen=True)
class BulkFailure:
    request_id: int
    kind: ErrorKind
    message: str = ""


@dataclass(frozen=True)
class BulkResult:
    succeeded: list[int] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed and not self.skipped

    def failure_for(self, request_id: int) -> Optional[BulkFailure]:
        return next((f for f in self.failed if f.request_id == int(request_id)), None)


class BulkApprovalCoordinator:
    """Applies one decision to many requests, one request at a time.

    Each id is an independent approval: a failure is recorded in that id's
    slot and processing moves on. Earlier successes are never rolled back.
    Ids are handled in the order given (duplicates once). Callers must not
    run two bulk operations over overlapping ids at the same time.
    """

    def __init__(self, requests: RequestService):
        self._requests = requests

    def bulk_approve(
        self,
        ids: Iterable[int],
        *,
        approver: Identity,
        today: date,
        notes: str = "",
        stop: Optional[threading.Event] = None,
    ) -> BulkResult:
        def decide(request_id: int) -> None:
            self._requests.approve(approver=approver, request_id=request_id, today=today, notes=notes)

        return self._run(ids, decide, op="approve", approver=approver, stop=stop)

    def bulk_reject(
        self,
        ids: Iterable[int],
        *,
        approver: Identity,
        reason: str,
        today: date,
        stop: Optional[threading.Event] = None,
    ) -> BulkResult:
        def decide(request_id: int) -> None:
            self._requests.reject(approver=approver, request_id=request_id, reason=reason, today=today)

        return self._run(ids, decide, op="reject", approver=approver, stop=stop)

    def _run(
        self,
        ids: Iterable[int],
        decide: Callable[[int], None],
        *,
        op: str,
        approver: Identity,
        stop: Optional[threading.Event],
    ) -> BulkResult:
        ordered = list(dict.fromkeys(int(i) for i in ids))
        result = BulkResult()

        for pos, request_id in enumerate(ordered):
            # Stopping is only honoured between two decisions.
            if stop is not None and stop.is_set():
                result.skipped.extend(ordered[pos:])
                logger.info(f"Bulk {op} stopped by caller; {len(ordered) - pos} request(s) skipped")
                break
            try:
                decide(request_id)
            except DomainError as exc:
                result.failed.append(BulkFailure(request_id=request_id, kind=exc.kind, message=str(exc)))
                logger.warning(f"Bulk {op}: request {request_id} failed with {exc.kind.value}: {exc}")
            except Exception as exc:
                logger.exception(f"Bulk {op}: unexpected error on request {request_id}")
                result.failed.append(BulkFailure(request_id=request_id, kind=ErrorKind.INTERNAL, message=str(exc)))
            else:
                result.succeeded.append(request_id)

        logger.info(
            f"Bulk {op} by {approver.audit_name}: {len(result.succeeded)} succeeded, "
            f"{len(result.failed)} failed, {len(result.skipped)} skipped"
        )
        return result
