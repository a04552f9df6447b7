"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, rulectl.toml only contains overrides.
RuleSettings composes these sections directly.
"""

from __future__ import annotations

from datetime import tzinfo

from dateutil import tz
from pydantic import BaseModel, field_validator

# --- rulectl.toml sections ---


class EvaluationConfig(BaseModel):
    """[evaluation] section."""

    model_config = {"frozen": True}

    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if tz.gettz(value) is None:
            msg = f"unknown timezone '{value}'"
            raise ValueError(msg)
        return value

    @property
    def zone(self) -> tzinfo:
        """Timezone applied to timestamps written without a UTC offset."""
        zone = tz.gettz(self.timezone)
        assert zone is not None  # checked by the validator
        return zone


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    show_next_change: bool = True
