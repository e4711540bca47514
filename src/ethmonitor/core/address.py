"""Ethereum address helpers."""

import re
from typing import Optional

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_valid_address(address: Optional[str]) -> bool:
    """Return True for a 0x-prefixed, 40 hex digit address."""
    return address is not None and bool(_ADDRESS_RE.match(address))

