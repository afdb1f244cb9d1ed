"""Booking submission: validate, price, persist, then build the WhatsApp hand-off.

A booking that fails to persist gets no hand-off link.
"""
import logging
import re
from typing import Optional
from urllib.parse import quote

from app.core.config import settings
from app.core.enums import BookingStatus, ErrorKind, TripType
from app.core.metrics import bookings_submitted
from app.core.results import StoreError
from app.schemas.booking import BookingOut, BookingRequest
from app.schemas.fare import DistanceEstimate, FareBreakdown
from app.services.fare import compute_fare, estimate_distance
from app.services.pricing_store import PricingStore

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"[0-9]{10}")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

SERVICE_TYPE = "mumbai-local"


class BookingError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_RE.fullmatch(phone or ""))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email or ""))


def validate_booking(req: BookingRequest) -> None:
    required = [req.customer_name, req.customer_phone, req.pickup, req.drop, req.date, req.time]
    if not all(v and v.strip() for v in required):
        raise BookingError(ErrorKind.VALIDATION_ERROR, "Please fill all required fields")
    if not is_valid_phone(req.customer_phone):
        raise BookingError(ErrorKind.VALIDATION_ERROR, "Please enter a valid 10-digit phone number.")
    if req.customer_email and not is_valid_email(req.customer_email):
        raise BookingError(ErrorKind.VALIDATION_ERROR, "Please enter a valid email address.")
    if req.pickup_coords is None or req.drop_coords is None:
        raise BookingError(
            ErrorKind.VALIDATION_ERROR,
            "Unable to calculate distance. Please check your locations.",
        )


def _number(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def service_label(trip_type: TripType) -> str:
    return "Airport Transfer" if trip_type == TripType.AIRPORT else "Local Ride"


def build_message(req: BookingRequest, distance: DistanceEstimate, fare: Optional[FareBreakdown]) -> str:
    total = fare.total if fare else 0
    return (
        "Mumbai Local Booking Request:\n\n"
        f"Customer: {req.customer_name}\n"
        f"Phone: {req.customer_phone}\n"
        f"Email: {req.customer_email or 'Not provided'}\n\n"
        f"Pickup: {req.pickup}\n"
        f"Drop: {req.drop}\n"
        f"Distance: {_number(distance.distance_km)} km\n"
        f"Duration: {_number(distance.duration_minutes)} min\n"
        f"Car Type: {req.car_type}\n"
        f"Date: {req.date}\n"
        f"Time: {req.time}\n"
        f"Service Type: {service_label(req.trip_type)}\n"
        f"Estimated Price: ₹{total}\n\n"
        "Please confirm my booking."
    )


def whatsapp_link(message: str, number: Optional[str] = None) -> str:
    return f"https://wa.me/{number or settings.WHATSAPP_NUMBER}?text={quote(message, safe='')}"


async def submit_booking(req: BookingRequest, store: PricingStore, http_client=None) -> BookingOut:
    try:
        validate_booking(req)
    except BookingError:
        bookings_submitted.labels(outcome="invalid").inc()
        raise

    distance = await estimate_distance(req.pickup_coords, req.drop_coords, client=http_client)
    if distance.distance_km == 0:
        bookings_submitted.labels(outcome="invalid").inc()
        raise BookingError(
            ErrorKind.VALIDATION_ERROR,
            "Unable to calculate distance. Please check your locations.",
        )

    fare = compute_fare(distance.distance_km, req.car_type, req.trip_type, store.local_rates)
    if fare is None:
        bookings_submitted.labels(outcome="not_ready").inc()
        raise BookingError(ErrorKind.TRANSIENT_FAILURE, "Fares are not available yet. Please try again.")

    try:
        booking_id = await store.table_store.insert_booking(
            customer_id="guest",
            customer_name=req.customer_name.strip(),
            customer_phone=req.customer_phone,
            customer_email=req.customer_email or None,
            service_type=SERVICE_TYPE,
            from_location=req.pickup,
            to_location=req.drop,
            car_type=str(req.car_type),
            trip_type=str(req.trip_type),
            travel_date=req.date,
            travel_time=req.time,
            distance_km=distance.distance_km,
            estimated_price=fare.total,
            status=BookingStatus.PENDING,
        )
    except StoreError as e:
        logger.error(f"Error saving booking for {req.customer_phone}: {e.message}")
        bookings_submitted.labels(outcome="persist_failed").inc()
        raise BookingError(ErrorKind.TRANSIENT_FAILURE, "Failed to save booking. Please try again.")

    message = build_message(req, distance, fare)
    bookings_submitted.labels(outcome="accepted").inc()
    logger.info(f"Booking {booking_id} saved, fare {fare.total}")
    return BookingOut(
        booking_id=booking_id,
        distance=distance,
        fare=fare,
        message=message,
        whatsapp_url=whatsapp_link(message),
    )
