from sqlalchemy import Column, String
from app.models.base import BaseModel


class City(BaseModel):
    __tablename__ = "cities"
    name = Column(String(120), unique=True, nullable=False, index=True)
