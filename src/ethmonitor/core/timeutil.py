"""Timestamp utilities for block times (always UTC)."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.UTC


def parse_block_timestamp(value: Optional[str]) -> datetime:
    """
    Parse an upstream block timestamp (ISO-8601) into an aware UTC datetime.

    Naive values are assumed to be UTC. Missing or unparsable values raise
    ValueError; there is no fallback timestamp.
    """
    if value is None or not value.strip():
        raise ValueError("Missing block timestamp")
    try:
        dt = date_parser.isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Unparsable block timestamp: {value!r}") from e
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)
