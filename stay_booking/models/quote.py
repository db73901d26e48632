"""Itemized price quote for a candidate stay."""

from pydantic import BaseModel, ConfigDict, Field


class PriceQuote(BaseModel):
    """Price breakdown for a stay, in whole currency units.

    Derived on demand and never persisted; the booking store owns the
    authoritative price at submission time.
    """

    nights: int = Field(ge=1)
    base_price_per_night: int = Field(alias="basePricePerNight")
    subtotal: int
    cleaning_fee: int = Field(alias="cleaningFee")
    service_fee: int = Field(alias="serviceFee")
    taxes: int = 0
    total: int

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def line_items(self) -> list[tuple[str, int]]:
        """Breakdown rows in display order, e.g. ("100 x 3 nights", 300)."""
        items = [
            (f"{self.base_price_per_night} x {self.nights} nights", self.subtotal),
            ("Cleaning fee", self.cleaning_fee),
            ("Service fee", self.service_fee),
        ]
        if self.taxes:
            items.append(("Taxes", self.taxes))
        return items
