from __future__ import annotations

from dataclasses import dataclass

from .aggregator import EmployeeAggregator
from .auth import PortalAuthService
from .card_resolver import CardResolver, CardService
from .dispatch import TaskDispatcher, ThreadPoolDispatcher
from .gateway import BackendGateway
from .http_backend_client import HttpBackendClient
from .usage import UsageService
from .visit_recorder import VisitRecorder


@dataclass(frozen=True)
class PortalContainer:
    backend: BackendGateway
    dispatcher: TaskDispatcher

    auth_service: PortalAuthService
    card_service: CardService
    usage_service: UsageService


def build_portal_container(
    *,
    backend_url: str = "http://localhost:3000",
    timeout: float = 10.0,
    visit_workers: int = 4,
    aggregate_workers: int = 8,
    backend: BackendGateway | None = None,
    dispatcher: TaskDispatcher | None = None,
) -> PortalContainer:
    backend = backend or HttpBackendClient(backend_url, timeout=timeout)
    dispatcher = dispatcher or ThreadPoolDispatcher(max_workers=visit_workers)

    recorder = VisitRecorder(backend, dispatcher)
    card_service = CardService(CardResolver(backend), recorder)
    usage_service = UsageService(backend, EmployeeAggregator(backend, max_workers=aggregate_workers))

    return PortalContainer(
        backend=backend,
        dispatcher=dispatcher,
        auth_service=PortalAuthService(backend),
        card_service=card_service,
        usage_service=usage_service,
    )
