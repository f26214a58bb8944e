from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from postcode_anywhere.core.errors import ConfigurationError

_CUTOFF_MESSAGE = "Cache cutoff must be a string in an ISO 8601 date/time format"


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


@dataclass(frozen=True)
class FreshnessPolicy:
    """
    Decides whether a cached postcode entry can be trusted.

    ``cutoff`` is an absolute instant: an entry is fresh only when it was
    created strictly after it. With no cutoff every entry is fresh, so the
    cache never expires by default.
    """

    cutoff: datetime | None = None

    def __post_init__(self) -> None:
        if self.cutoff is not None:
            object.__setattr__(self, "cutoff", as_utc(self.cutoff))

    def is_fresh(self, created: datetime) -> bool:
        if self.cutoff is None:
            return True
        return as_utc(created) > self.cutoff

    @classmethod
    def from_string(cls, value: object) -> FreshnessPolicy:
        """Raises ConfigurationError for non-string or unparsable input."""
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(_CUTOFF_MESSAGE)
        try:
            return cls(cutoff=parse_timestamp(value))
        except ValueError as e:
            raise ConfigurationError(_CUTOFF_MESSAGE) from e

    @classmethod
    def from_max_age(cls, max_age: timedelta, *, now: datetime | None = None) -> FreshnessPolicy:
        # cutoff is fixed once here, it does not slide with later calls
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        return cls(cutoff=now - max_age)
