from __future__ import annotations

import logging

from ..core.enums import VisitSource
from ..visits.model import NewVisit
from ..visits.user_agent import parse_user_agent
from .context import RequestMeta
from .dispatch import TaskDispatcher
from .gateway import BackendGateway

logger = logging.getLogger(__name__)


class VisitRecorder:
    """Turn a card request into one visit write, dispatched in the background.

    The dispatched task owns its error boundary, so a failed write can never
    reach the card response.
    """

    def __init__(self, backend: BackendGateway, dispatcher: TaskDispatcher):
        self._backend = backend
        self._dispatcher = dispatcher

    @staticmethod
    def build_visit(employee_id: int, meta: RequestMeta) -> NewVisit:
        client = parse_user_agent(meta.user_agent)
        return NewVisit(
            employee_id=int(employee_id),
            source=VisitSource.from_hint(meta.source_hint),
            os=client.os,
            browser=client.browser,
            device_type=client.device_type,
            ip_address=meta.ip_address,
        )

    def record(self, employee_id: int, meta: RequestMeta) -> None:
        try:
            visit = self.build_visit(employee_id, meta)
            self._dispatcher.submit(self._write, visit)
        except Exception as e:
            logger.warning("Visit for employee %s was not dispatched: %s", employee_id, e)

    def _write(self, visit: NewVisit) -> None:
        try:
            self._backend.log_visit(visit.to_payload())
            logger.info(
                "Visit recorded for employee %s (%s, %s/%s/%s)",
                visit.employee_id,
                visit.source.value,
                visit.os,
                visit.browser,
                visit.device_type,
            )
        except Exception as e:
            logger.warning("Visit write failed for employee %s: %s", visit.employee_id, e)
