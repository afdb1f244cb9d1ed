from typing import Optional
from pydantic import BaseModel, ConfigDict

from app.core.enums import CarType, TripType
from app.schemas.fare import Coordinates, DistanceEstimate, FareBreakdown


class BookingRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_name: str = ""
    customer_phone: str = ""
    customer_email: Optional[str] = None
    pickup: str = ""
    drop: str = ""
    pickup_coords: Optional[Coordinates] = None
    drop_coords: Optional[Coordinates] = None
    car_type: CarType = CarType.FOUR_SEATER
    trip_type: TripType = TripType.NORMAL
    date: str = ""
    time: str = ""


class BookingOut(BaseModel):
    booking_id: str
    distance: DistanceEstimate
    fare: FareBreakdown
    message: str
    whatsapp_url: str
