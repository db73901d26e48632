"""Price quote calculation for a candidate stay."""

import math
from datetime import date
from decimal import Decimal
from typing import Optional

from structlog import get_logger

from stay_booking.config import settings
from stay_booking.models.property import PropertyPricing
from stay_booking.models.quote import PriceQuote

logger = get_logger(__name__)


class PricingCalculator:
    """Computes itemized quotes from a nightly rate and fee schedule.

    Amounts are integers in whole currency units. Fees that the property
    does not supply are derived from the configured rates and floored:

    - cleaning fee: floor(price_per_night * cleaning_fee_rate)
    - service fee: floor(subtotal * service_fee_rate)

    Taxes have no default and count as zero when absent.
    """

    def __init__(
        self,
        cleaning_fee_rate: Optional[Decimal] = None,
        service_fee_rate: Optional[Decimal] = None,
    ):
        """Initialize the calculator.

        Args:
            cleaning_fee_rate: Default cleaning fee rate, from settings if None
            service_fee_rate: Default service fee rate, from settings if None
        """
        self.cleaning_fee_rate = Decimal(
            str(settings.pricing.cleaning_fee_rate if cleaning_fee_rate is None else cleaning_fee_rate)
        )
        self.service_fee_rate = Decimal(
            str(settings.pricing.service_fee_rate if service_fee_rate is None else service_fee_rate)
        )

    @staticmethod
    def nights_between(check_in: date, check_out: date) -> int:
        """Whole days from check-in to check-out (negative if inverted)."""
        return (check_out - check_in).days

    def quote(
        self,
        check_in: date,
        check_out: date,
        price_per_night: int,
        cleaning_fee: Optional[int] = None,
        service_fee: Optional[int] = None,
        taxes: Optional[int] = None,
    ) -> Optional[PriceQuote]:
        """Quote a stay between two dates.

        Returns:
            PriceQuote, or None when the stay is shorter than one night
        """
        return self.quote_for_nights(
            self.nights_between(check_in, check_out),
            price_per_night,
            cleaning_fee=cleaning_fee,
            service_fee=service_fee,
            taxes=taxes,
        )

    def quote_for_property(
        self,
        check_in: date,
        check_out: date,
        pricing: PropertyPricing,
    ) -> Optional[PriceQuote]:
        """Quote a stay using a property's pricing constants."""
        return self.quote(
            check_in,
            check_out,
            pricing.price_per_night,
            cleaning_fee=pricing.cleaning_fee,
            service_fee=pricing.service_fee,
            taxes=pricing.taxes,
        )

    def quote_for_nights(
        self,
        nights: int,
        price_per_night: int,
        cleaning_fee: Optional[int] = None,
        service_fee: Optional[int] = None,
        taxes: Optional[int] = None,
    ) -> Optional[PriceQuote]:
        """Quote a stay from a night count.

        Args:
            nights: Number of nights
            price_per_night: Nightly rate
            cleaning_fee: Explicit cleaning fee, derived if None
            service_fee: Explicit service fee, derived if None
            taxes: Explicit taxes, zero if None

        Returns:
            PriceQuote, or None when ``nights`` is below 1

        Raises:
            ValueError: If the rate or an explicit fee is negative
        """
        for name, amount in (
            ("price_per_night", price_per_night),
            ("cleaning_fee", cleaning_fee),
            ("service_fee", service_fee),
            ("taxes", taxes),
        ):
            if amount is not None and amount < 0:
                raise ValueError(f"{name} cannot be negative: {amount}")

        if nights < 1:
            logger.debug("No quote for stay shorter than one night", nights=nights)
            return None

        subtotal = nights * price_per_night
        if cleaning_fee is None:
            cleaning_fee = math.floor(price_per_night * self.cleaning_fee_rate)
        if service_fee is None:
            service_fee = math.floor(subtotal * self.service_fee_rate)
        if taxes is None:
            taxes = 0

        return PriceQuote(
            nights=nights,
            base_price_per_night=price_per_night,
            subtotal=subtotal,
            cleaning_fee=cleaning_fee,
            service_fee=service_fee,
            taxes=taxes,
            total=subtotal + cleaning_fee + service_fee + taxes,
        )
