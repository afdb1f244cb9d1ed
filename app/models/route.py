from sqlalchemy import Column, String, Numeric, UniqueConstraint
from app.models.base import BaseModel


class Route(BaseModel):
    __tablename__ = "routes"
    __table_args__ = (
        UniqueConstraint("from_city", "to_city", name="uq_routes_city_pair"),
    )

    from_city = Column(String(120), nullable=False)
    to_city = Column(String(120), nullable=False)
    price_4_seater = Column(Numeric(10, 2), nullable=False)
    price_6_seater = Column(Numeric(10, 2), nullable=False)
