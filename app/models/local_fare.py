from sqlalchemy import Column, String, Numeric
from app.models.base import BaseModel


class LocalFare(BaseModel):
    __tablename__ = "local_fares"

    service_area = Column(String(120), unique=True, nullable=False, index=True)
    normal_4_seater_rate_per_km = Column(Numeric(10, 2), nullable=False)
    normal_6_seater_rate_per_km = Column(Numeric(10, 2), nullable=False)
    airport_4_seater_rate_per_km = Column(Numeric(10, 2), nullable=False)
    airport_6_seater_rate_per_km = Column(Numeric(10, 2), nullable=False)
