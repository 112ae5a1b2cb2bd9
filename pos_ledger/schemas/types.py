"""Shared field types for request schemas."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator


def to_naive_utc(value: datetime | None) -> datetime | None:
    """
    Convert an offset-aware datetime to naive UTC.

    Everything is stored and compared as naive UTC, so an
    incoming offset is applied rather than dropped. Naive
    values are taken to be UTC already.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]
