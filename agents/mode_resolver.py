from __future__ import annotations

import logging
from typing import Mapping, Optional

from data.models import Mode


logger = logging.getLogger(__name__)

MOCK_HEADER = "X-Mock-Mode"


def read_override(body_flag: Optional[bool], headers: Optional[Mapping[str, str]] = None) -> Optional[bool]:
    """Return the per-request mock override, or None when the caller sent none.

    The parsed ``mock`` body field wins over the ``X-Mock-Mode`` header. Header values
    other than ``true``/``false`` are ignored.
    """
    if body_flag is not None:
        return body_flag
    if headers is not None:
        raw = (headers.get(MOCK_HEADER) or "").strip().lower()
        if raw == "true":
            return True
        if raw == "false":
            return False
    return None


def resolve_mode(mock_override: Optional[bool], default_mode: Mode) -> Mode:
    """Pick the result source for one request; depends only on its arguments."""
    if mock_override is not None:
        mode = Mode.MOCK if mock_override else Mode.ASSISTED
        logger.debug("resolve_mode: explicit override mock=%s -> %s", mock_override, mode.value)
        return mode
    logger.debug("resolve_mode: no override, using default %s", default_mode.value)
    return default_mode
