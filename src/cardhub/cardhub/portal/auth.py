from __future__ import annotations

import logging
from dataclasses import dataclass

from ..common.validators import require_non_empty
from ..subscriptions.gate import AccessState, compute_access_state, route_after_login
from .context import PortalContext
from .gateway import BackendGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginOutcome:
    context: PortalContext
    access: AccessState

    @property
    def next_endpoint(self) -> str:
        return route_after_login(self.access)


class PortalAuthService:
    """Use case: log a company into the portal and decide where it lands."""

    def __init__(self, backend: BackendGateway):
        self._backend = backend

    def login(self, email: str, password: str) -> LoginOutcome:
        email = require_non_empty(email, "Email")
        require_non_empty(password, "Password")

        token = self._backend.login(email, password)
        profile = self._backend.get_profile(token)
        ctx = PortalContext(company_id=int(profile["id"]), access_token=token)

        access = compute_access_state(self._backend.get_subscription(ctx))
        logger.info(
            "Company %s logged in (subscription=%s, expired=%s)",
            ctx.company_id,
            access.has_subscription,
            access.is_expired,
        )
        return LoginOutcome(context=ctx, access=access)
