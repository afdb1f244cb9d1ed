"""Fare estimation.

Distance comes from the distance service when it answers, and from the
great-circle distance otherwise. Fares are a per-km rate picked from the
service area's rate table, rounded to whole currency units and floored at
the minimum fare.
"""
import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import httpx

from app.core.config import settings
from app.core.enums import CarType, DistanceSource, TripType
from app.core.metrics import distance_lookups, fare_quotes
from app.schemas.fare import Coordinates, DistanceEstimate, FareBreakdown
from app.schemas.pricing import LocalFareRates

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
FALLBACK_MINUTES_PER_KM = 3

RATE_FIELDS = {
    (TripType.NORMAL, CarType.FOUR_SEATER): "normal_4_seater_rate_per_km",
    (TripType.NORMAL, CarType.SIX_SEATER): "normal_6_seater_rate_per_km",
    (TripType.AIRPORT, CarType.FOUR_SEATER): "airport_4_seater_rate_per_km",
    (TripType.AIRPORT, CarType.SIX_SEATER): "airport_6_seater_rate_per_km",
}


def round_half_up(value: float, places: int = 0) -> Decimal:
    step = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP)


def haversine_km(pickup: Coordinates, drop: Coordinates) -> float:
    """Great-circle distance in km, rounded to 2 decimals."""
    d_lat = math.radians(drop.lat - pickup.lat)
    d_lng = math.radians(drop.lng - pickup.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(pickup.lat))
        * math.cos(math.radians(drop.lat))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return float(round_half_up(EARTH_RADIUS_KM * c, 2))


def fallback_estimate(pickup: Coordinates, drop: Coordinates) -> DistanceEstimate:
    distance = haversine_km(pickup, drop)
    return DistanceEstimate(
        distance_km=distance,
        duration_minutes=int(round_half_up(distance * FALLBACK_MINUTES_PER_KM)),
        source=DistanceSource.FALLBACK,
    )


async def _query_distance_service(
    client: httpx.AsyncClient, pickup: Coordinates, drop: Coordinates
) -> DistanceEstimate:
    response = await client.get(
        settings.DISTANCE_SERVICE_URL,
        params={"origins": pickup.as_param(), "destinations": drop.as_param()},
    )
    response.raise_for_status()
    data = response.json()
    return DistanceEstimate(
        distance_km=float(data["distance"]),
        duration_minutes=float(data["duration"]),
        source=DistanceSource.SERVICE,
    )


async def estimate_distance(
    pickup: Coordinates,
    drop: Coordinates,
    client: Optional[httpx.AsyncClient] = None,
) -> DistanceEstimate:
    if not settings.DISTANCE_SERVICE_URL:
        estimate = fallback_estimate(pickup, drop)
        distance_lookups.labels(source=estimate.source.value).inc()
        return estimate

    try:
        if client is not None:
            estimate = await _query_distance_service(client, pickup, drop)
        else:
            client_kwargs = {}
            if settings.DISTANCE_TIMEOUT is not None:
                client_kwargs["timeout"] = settings.DISTANCE_TIMEOUT
            async with httpx.AsyncClient(**client_kwargs) as own_client:
                estimate = await _query_distance_service(own_client, pickup, drop)
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        logger.warning(f"Distance service failed, using straight-line distance: {e}")
        estimate = fallback_estimate(pickup, drop)

    distance_lookups.labels(source=estimate.source.value).inc()
    return estimate


def select_rate(rates: LocalFareRates, car_type: CarType, trip_type: TripType) -> float:
    return getattr(rates, RATE_FIELDS[(TripType(trip_type), CarType(car_type))])


def compute_fare(
    distance_km: float,
    car_type: CarType,
    trip_type: TripType,
    rates: Optional[LocalFareRates],
    minimum_fare: Optional[int] = None,
) -> Optional[FareBreakdown]:
    """Return the fare breakdown, or None while distance or rates are missing."""
    if not distance_km or distance_km <= 0 or rates is None:
        return None

    floor = settings.MINIMUM_FARE if minimum_fare is None else minimum_fare
    rate_per_km = select_rate(rates, car_type, trip_type)
    raw_total = int(round_half_up(distance_km * rate_per_km))
    is_minimum_fare = raw_total < floor

    fare_quotes.labels(trip_type=str(trip_type), car_type=str(car_type)).inc()
    return FareBreakdown(
        rate_per_km=rate_per_km,
        total=floor if is_minimum_fare else raw_total,
        is_minimum_fare=is_minimum_fare,
    )
