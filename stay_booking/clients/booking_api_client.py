"""Booking API client for property availability and booking submission."""

import time
from typing import Any, Optional

import httpx
from pydantic import ValidationError
from structlog import get_logger

from stay_booking.config import settings
from stay_booking.models.booking import (
    Booking,
    BookingInterval,
    BookingRequest,
    BookingsResponse,
)
from stay_booking.models.property import Property

logger = get_logger(__name__)


class BookingAPIClientError(Exception):
    """Base exception for booking API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BookingAPIAuthenticationError(BookingAPIClientError):
    """Raised when the booking API rejects the credentials."""

    pass


class BookingAPINotFoundError(BookingAPIClientError):
    """Raised when a booking API resource is not found."""

    pass


class BookingAPIConflictError(BookingAPIClientError):
    """Raised when the booking store rejects a request that conflicts with another booking."""

    pass


class BookingAPIServerError(BookingAPIClientError):
    """Raised when the booking API returns a server error."""

    pass


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message from a JSON envelope, or the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]


class BookingAPIClient:
    """Client for the booking and property API endpoints."""

    def __init__(
        self,
        auth_token: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the booking API client.

        Args:
            auth_token: Bearer token of the signed-in user; falls back to settings
            base_url: API base URL; falls back to settings
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.booking_api_base_url).rstrip("/")
        self.auth_token = auth_token or settings.booking_api.auth_token
        self.timeout = settings.booking_api.request_timeout
        self.max_retries = settings.booking_api.max_retries
        self.retry_backoff_base = 2  # Exponential backoff base
        self.transport = transport

    def _get_headers(self) -> dict[str, str]:
        """Get default headers for booking API requests.

        Returns:
            Dictionary of HTTP headers, with the bearer token when available.
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "StayBookingClient/1.0",
        }
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        retry: bool = True,
    ) -> dict[str, Any]:
        """Make an HTTP request to the booking API with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, etc.)
            endpoint: API endpoint path (without base URL)
            data: Request body data (for POST/PUT requests)
            params: Query parameters
            retry: Retry on timeouts, transport errors and 5xx. Disable for
                requests that change state, since the store may have applied
                a request whose response was lost.

        Returns:
            JSON response as a dictionary

        Raises:
            BookingAPIAuthenticationError: If authentication fails
            BookingAPINotFoundError: If resource not found
            BookingAPIConflictError: If the request conflicts with existing bookings
            BookingAPIServerError: If server error persists after retries
            BookingAPIClientError: For other API errors
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers()

        attempts = self.max_retries if retry else 1

        for attempt in range(attempts):
            try:
                with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                    response = client.request(
                        method=method,
                        url=url,
                        headers=headers,
                        json=data,
                        params=params,
                    )

                    if response.status_code in (401, 403):
                        logger.error(
                            "Booking API authentication failed",
                            endpoint=endpoint,
                            status_code=response.status_code,
                        )
                        raise BookingAPIAuthenticationError(
                            f"Not authorized for {endpoint}: {_error_message(response)}",
                            status_code=response.status_code,
                        )

                    if response.status_code == 404:
                        logger.warning(
                            "Booking API resource not found",
                            endpoint=endpoint,
                            status_code=response.status_code,
                        )
                        raise BookingAPINotFoundError(
                            f"Resource not found: {endpoint}",
                            status_code=response.status_code,
                        )

                    if response.status_code == 409:
                        logger.warning(
                            "Booking API conflict",
                            endpoint=endpoint,
                            status_code=response.status_code,
                        )
                        raise BookingAPIConflictError(
                            _error_message(response),
                            status_code=response.status_code,
                        )

                    # Handle server errors with retry
                    if response.status_code >= 500:
                        if attempt < attempts - 1:
                            wait_time = self.retry_backoff_base ** attempt
                            logger.warning(
                                "Booking API server error, retrying",
                                endpoint=endpoint,
                                status_code=response.status_code,
                                attempt=attempt + 1,
                                max_retries=attempts,
                                wait_seconds=wait_time,
                            )
                            time.sleep(wait_time)
                            continue
                        logger.error(
                            "Booking API server error, max retries exceeded",
                            endpoint=endpoint,
                            status_code=response.status_code,
                        )
                        raise BookingAPIServerError(
                            f"Server error at {endpoint}: {_error_message(response)}",
                            status_code=response.status_code,
                        )

                    if 400 <= response.status_code < 500:
                        logger.error(
                            "Booking API client error",
                            endpoint=endpoint,
                            status_code=response.status_code,
                            response_text=response.text[:200],
                        )
                        raise BookingAPIClientError(
                            _error_message(response),
                            status_code=response.status_code,
                        )

                    if response.status_code in (200, 201, 204):
                        logger.debug(
                            "Booking API request successful",
                            endpoint=endpoint,
                            method=method,
                            status_code=response.status_code,
                        )
                        if response.text:
                            return response.json()
                        return {}

                    logger.error(
                        "Unexpected booking API response status",
                        endpoint=endpoint,
                        status_code=response.status_code,
                    )
                    raise BookingAPIClientError(
                        f"Unexpected response from {endpoint}: {response.status_code}",
                        status_code=response.status_code,
                    )

            except httpx.TimeoutException as e:
                if attempt < attempts - 1:
                    wait_time = self.retry_backoff_base ** attempt
                    logger.warning(
                        "Booking API request timeout, retrying",
                        endpoint=endpoint,
                        attempt=attempt + 1,
                        max_retries=attempts,
                        wait_seconds=wait_time,
                    )
                    time.sleep(wait_time)
                    continue
                logger.error(
                    "Booking API request timeout, max retries exceeded",
                    endpoint=endpoint,
                )
                raise BookingAPIClientError(f"Request timeout for {endpoint}") from e

            except httpx.RequestError as e:
                if attempt < attempts - 1:
                    wait_time = self.retry_backoff_base ** attempt
                    logger.warning(
                        "Booking API request error, retrying",
                        endpoint=endpoint,
                        error=str(e),
                        attempt=attempt + 1,
                        max_retries=attempts,
                        wait_seconds=wait_time,
                    )
                    time.sleep(wait_time)
                    continue
                logger.error(
                    "Booking API request error, max retries exceeded",
                    endpoint=endpoint,
                    error=str(e),
                )
                raise BookingAPIClientError(f"Request failed for {endpoint}: {str(e)}") from e

        raise BookingAPIClientError(f"Failed to complete request to {endpoint}")

    @staticmethod
    def _unwrap(response: dict[str, Any]) -> dict[str, Any]:
        """Return the ``data`` member of the {success, message, data} envelope."""
        data = response.get("data")
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _parse_booking(data: dict[str, Any], endpoint: str) -> Booking:
        """Validate the ``booking`` member of a response envelope."""
        try:
            return Booking.model_validate(data.get("booking") or {})
        except ValidationError as e:
            logger.error("Malformed booking response", endpoint=endpoint, error=str(e))
            raise BookingAPIClientError(f"Malformed booking response from {endpoint}") from e

    def get_property(self, property_id: str) -> tuple[Property, list[Booking]]:
        """Fetch a property together with its bookings.

        Args:
            property_id: Property identifier

        Returns:
            Tuple of (property, bookings)

        Raises:
            BookingAPIClientError: If the API request fails or the payload is malformed
        """
        logger.info("Fetching property", property_id=property_id)
        data = self._unwrap(self._make_request("GET", f"/properties/{property_id}"))

        try:
            prop = Property.model_validate(data.get("property") or {})
            bookings = [Booking.model_validate(b) for b in data.get("bookings") or []]
        except ValidationError as e:
            logger.error("Malformed property response", property_id=property_id, error=str(e))
            raise BookingAPIClientError(f"Malformed property response for {property_id}") from e

        logger.info(
            "Successfully fetched property",
            property_id=property_id,
            booking_count=len(bookings),
        )
        return prop, bookings

    def get_booking_intervals(self, property_id: str) -> list[BookingInterval]:
        """Fetch a property's bookings as calendar intervals.

        Cancelled bookings are dropped. Records with an empty or inverted
        date range are rejected and logged.

        Args:
            property_id: Property identifier

        Returns:
            Booking intervals for the availability resolver
        """
        _, bookings = self.get_property(property_id)
        return self.bookings_to_intervals(property_id, bookings)

    @staticmethod
    def bookings_to_intervals(property_id: str, bookings: list[Booking]) -> list[BookingInterval]:
        """Map booking records to intervals, dropping cancelled and invalid ones."""
        intervals = []
        rejected = 0
        for booking in bookings:
            try:
                interval = booking.to_interval()
            except ValidationError as e:
                rejected += 1
                logger.error(
                    "Rejected booking with invalid date range",
                    property_id=property_id,
                    booking_id=booking.id,
                    check_in=booking.check_in_date.isoformat(),
                    check_out=booking.check_out_date.isoformat(),
                    error=str(e),
                )
                continue
            if interval is not None:
                intervals.append(interval)

        logger.info(
            "Booking intervals resolved",
            property_id=property_id,
            interval_count=len(intervals),
            rejected=rejected,
        )
        return intervals

    def create_booking(self, request: BookingRequest) -> Booking:
        """Submit a booking request.

        Args:
            request: Finalized booking request

        Returns:
            Booking record created by the store

        Raises:
            BookingAPIConflictError: If the dates were claimed by another booking
            BookingAPIClientError: If the API request fails
        """
        logger.info(
            "Submitting booking request",
            property_id=request.property_id,
            check_in=request.check_in_date.isoformat(),
            check_out=request.check_out_date.isoformat(),
            guests=request.number_of_guests,
        )
        # Not retried: a lost response may hide a booking the store already created
        response = self._make_request("POST", "/bookings", data=request.to_payload(), retry=False)
        data = self._unwrap(response)
        booking = self._parse_booking(data, "/bookings")
        logger.info(
            "Booking request accepted",
            property_id=request.property_id,
            booking_id=booking.id,
            status=booking.status,
        )
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        """Fetch a single booking."""
        endpoint = f"/bookings/{booking_id}"
        data = self._unwrap(self._make_request("GET", endpoint))
        return self._parse_booking(data, endpoint)

    def cancel_booking(self, booking_id: str) -> Booking:
        """Cancel a booking and return the updated record."""
        logger.info("Cancelling booking", booking_id=booking_id)
        endpoint = f"/bookings/{booking_id}/cancel"
        data = self._unwrap(self._make_request("PUT", endpoint, retry=False))
        return self._parse_booking(data, endpoint)

    def get_user_bookings(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
    ) -> BookingsResponse:
        """Fetch the signed-in user's bookings, one page at a time.

        Args:
            page: Page number (1-based)
            limit: Page size
            status: Optional booking status filter

        Returns:
            Bookings with pagination info
        """
        params = {
            key: value
            for key, value in (("page", page), ("limit", limit), ("status", status))
            if value not in (None, "")
        }
        data = self._unwrap(self._make_request("GET", "/bookings", params=params or None))
        return BookingsResponse.model_validate(data)
