"""User-agent parsing for visit records.

``parse_user_agent`` never raises: anything it cannot classify falls back to
``unknown`` / ``desktop``.
"""

from __future__ import annotations

import logging
from typing import Optional

from user_agents import parse as parse_ua

from ..core.constants import DEFAULT_DEVICE_TYPE, UNKNOWN
from ..core.enums import DeviceType
from .model import ClientInfo

logger = logging.getLogger(__name__)

# ua-parser reports "Other" when it cannot recognise a family.
_UNRECOGNISED = {"", "other"}


def _family(value: Optional[str]) -> str:
    value = (value or "").strip()
    return UNKNOWN if value.lower() in _UNRECOGNISED else value


def parse_user_agent(user_agent: Optional[str]) -> ClientInfo:
    if not user_agent or not isinstance(user_agent, str) or not user_agent.strip():
        return ClientInfo()

    try:
        ua = parse_ua(user_agent)
    except Exception:
        logger.debug("Unparseable user-agent %r", user_agent, exc_info=True)
        return ClientInfo()

    if ua.is_tablet:
        device_type = DeviceType.TABLET.value
    elif ua.is_mobile:
        device_type = DeviceType.MOBILE.value
    else:
        # Crawlers report no device type and are counted as desktop.
        device_type = DEFAULT_DEVICE_TYPE

    return ClientInfo(os=_family(ua.os.family), browser=_family(ua.browser.family), device_type=device_type)
