from sqlalchemy import Column, String, Numeric, Enum
from app.models.base import BaseModel
from app.core.enums import BookingStatus


class Booking(BaseModel):
    __tablename__ = "bookings"

    customer_id = Column(String(64), nullable=False, default="guest")
    customer_name = Column(String(120), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    customer_email = Column(String(120), nullable=True)
    service_type = Column(String(40), nullable=False, default="mumbai-local")
    from_location = Column(String(255), nullable=False)
    to_location = Column(String(255), nullable=False)
    car_type = Column(String(20), nullable=False)
    trip_type = Column(String(20), nullable=False)
    travel_date = Column(String(20), nullable=False)
    travel_time = Column(String(20), nullable=False)
    distance_km = Column(Numeric(10, 2), nullable=False)
    estimated_price = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False)
