"""BaseService — foundation for rulectl services.

Every service receives the resolved :class:`RuleSettings` at construction
time and reads evaluation defaults (such as the timezone for naive
timestamps) from it.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING

from rulectl.domain.timestamps import ensure_aware, parse_datetime
from rulectl.services._helpers import now_utc

if TYPE_CHECKING:
    from rulectl.config.settings import RuleSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class EvaluateService(BaseService):
            def evaluate(self, node, ...) -> ServiceResult:
                now = self._resolve_now(now_text)
                ...
    """

    def __init__(self, settings: RuleSettings) -> None:
        self._settings = settings

    @property
    def default_tz(self) -> tzinfo:
        return self._settings.evaluation.zone

    def _resolve_now(self, now: str | datetime | None) -> datetime:
        """Evaluation instant: explicit text/datetime, or the current time.

        Raises:
            ValueError: If *now* is text that does not parse.
        """
        if now is None:
            return now_utc()
        if isinstance(now, datetime):
            return ensure_aware(now, self.default_tz)
        value = parse_datetime(now, self.default_tz)
        logger.debug("Evaluating at %s", value.isoformat())
        return value
