from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Iterable

from .approvals.bulk import BulkApprovalCoordinator
from .approvals.chain import StaticChainProvider
from .approvals.router import ApprovalRouter
from .loans.directory import InMemoryEmployeeDirectory
from .loans.eligibility import EligibilityValidator
from .loans.model import EmployeeSnapshot, LoanPolicy
from .loans.scheduler import InstallmentScheduler
from .requests.memory_repository import InMemoryRequestRepository
from .requests.service import RequestService


@dataclass(frozen=True)
class Container:
    policy: LoanPolicy
    chains: StaticChainProvider

    requests_repo: InMemoryRequestRepository
    directory: InMemoryEmployeeDirectory

    validator: EligibilityValidator
    scheduler: InstallmentScheduler
    router: ApprovalRouter
    request_service: RequestService
    bulk_coordinator: BulkApprovalCoordinator


def build_container(*, settings: ModuleType, employees: Iterable[EmployeeSnapshot] = ()) -> Container:
    policy = LoanPolicy.from_settings(getattr(settings, "LOAN_POLICY", None))
    chains = StaticChainProvider.from_settings(getattr(settings, "APPROVAL_CHAINS", []))

    requests_repo = InMemoryRequestRepository()
    directory = InMemoryEmployeeDirectory(employees)

    scheduler = InstallmentScheduler()
    validator = EligibilityValidator(policy, scheduler=scheduler)
    router = ApprovalRouter(chains, validator)
    request_service = RequestService(requests_repo, directory, router, scheduler=scheduler)
    bulk_coordinator = BulkApprovalCoordinator(request_service)

    return Container(
        policy=policy,
        chains=chains,
        requests_repo=requests_repo,
        directory=directory,
        validator=validator,
        scheduler=scheduler,
        router=router,
        request_service=request_service,
        bulk_coordinator=bulk_coordinator,
    )
