"""Token price payloads from the prices API."""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from ethmonitor.domain.models.base import UpstreamModel

USD = "usd"


class PriceQuote(UpstreamModel):
    """Price of a token in one currency."""

    currency: str
    value: Decimal
    last_updated_at: Optional[str] = None


class PriceError(UpstreamModel):
    message: str = ""


class TokenPriceEntry(UpstreamModel):
    """Quotes for one token, looked up by address or by symbol."""

    symbol: Optional[str] = None
    network: Optional[str] = None
    address: Optional[str] = None
    prices: list[PriceQuote] = Field(default_factory=list)
    error: Optional[PriceError] = None


class TokenPriceResponse(UpstreamModel):
    """Response of the by-address and by-symbol price endpoints."""

    data: list[TokenPriceEntry] = Field(default_factory=list)

    def usd_quote(self) -> Optional[Decimal]:
        """Return the first "usd" price across entries, or None when there is none."""
        for entry in self.data:
            for quote in entry.prices:
                if quote.currency.lower() == USD:
                    return quote.value
        return None
