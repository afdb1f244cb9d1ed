from typing import Optional
from pydantic import BaseModel, Field

from app.core.enums import CarType, TripType, DistanceSource


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def as_param(self) -> str:
        return f"{self.lat},{self.lng}"


class DistanceEstimate(BaseModel):
    distance_km: float
    duration_minutes: float
    source: DistanceSource


class FareBreakdown(BaseModel):
    rate_per_km: float
    total: int
    is_minimum_fare: bool


class FareEstimateRequest(BaseModel):
    pickup: Coordinates
    drop: Coordinates
    car_type: CarType = CarType.FOUR_SEATER
    trip_type: TripType = TripType.NORMAL


class FareEstimateResponse(BaseModel):
    distance: DistanceEstimate
    fare: Optional[FareBreakdown] = None
    ready: bool
