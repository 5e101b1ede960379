from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_TEMPLATE
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from .context import RequestMeta
from .gateway import BackendGateway
from .visit_recorder import VisitRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCard:
    employee: Employee
    template_id: str


def select_template(design_id: Optional[str], employee: Employee) -> str:
    """Path design first, then the employee's own design, then the default."""
    for candidate in (design_id, employee.design_id):
        if candidate and candidate.strip():
            return candidate.strip()
    return DEFAULT_TEMPLATE


class CardResolver:
    """Read-only: find the employee behind a public card URL."""

    def __init__(self, backend: BackendGateway):
        self._backend = backend

    def resolve(self, design_id: Optional[str], unique_url: str) -> ResolvedCard:
        employee = self._backend.get_employee_by_url(unique_url)
        if employee is None:
            raise NotFoundError("Employee not found")
        template_id = select_template(design_id, employee)
        logger.debug("Card %s resolved to employee %s with template %s", unique_url, employee.employee_id, template_id)
        return ResolvedCard(employee=employee, template_id=template_id)


class CardService:
    """Resolve a card and record exactly one visit for it."""

    def __init__(self, resolver: CardResolver, recorder: VisitRecorder):
        self._resolver = resolver
        self._recorder = recorder

    def open_card(self, design_id: Optional[str], unique_url: str, meta: RequestMeta) -> ResolvedCard:
        card = self._resolver.resolve(design_id, unique_url)
        self._recorder.record(card.employee.employee_id, meta)
        return card
