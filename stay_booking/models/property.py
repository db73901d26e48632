"""Pydantic models for property data consumed by the booking engine."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PropertyPricing(BaseModel):
    """Pricing constants of a single property."""

    price_per_night: int = Field(ge=0, alias="pricePerNight")
    cleaning_fee: Optional[int] = Field(None, ge=0, alias="cleaningFee")  # None = derive default
    service_fee: Optional[int] = Field(None, ge=0, alias="serviceFee")  # None = derive default
    taxes: Optional[int] = Field(None, ge=0)  # None = zero
    max_guests: int = Field(default=1, ge=1, alias="maxGuests")
    instant_book: bool = Field(default=False, alias="instantBook")

    model_config = ConfigDict(populate_by_name=True)


class Property(BaseModel):
    """Property listing as returned by the property API (booking-relevant subset).

    Pricing fields carry the same bounds as PropertyPricing, so a listing that
    parses always yields valid pricing constants.
    """

    id: str
    title: str = ""
    price_per_night: int = Field(ge=0, alias="pricePerNight")
    max_guests: int = Field(default=1, ge=1, alias="maxGuests")
    cleaning_fee: Optional[int] = Field(None, ge=0, alias="cleaningFee")
    service_fee: Optional[int] = Field(None, ge=0, alias="serviceFee")
    instant_book: bool = Field(default=False, alias="instantBook")
    check_in_time: Optional[str] = Field(None, alias="checkInTime")
    check_out_time: Optional[str] = Field(None, alias="checkOutTime")
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def pricing(self) -> PropertyPricing:
        """Extract the pricing constants for quoting a stay."""
        return PropertyPricing(
            price_per_night=self.price_per_night,
            cleaning_fee=self.cleaning_fee,
            service_fee=self.service_fee,
            max_guests=self.max_guests,
            instant_book=self.instant_book,
        )
