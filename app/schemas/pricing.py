from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.city import CityOut
from app.schemas.route import RouteOut


class LocalFareRates(BaseModel):
    """Per-km rates for one service area, replaced as a whole."""
    normal_4_seater_rate_per_km: float = Field(gt=0)
    normal_6_seater_rate_per_km: float = Field(gt=0)
    airport_4_seater_rate_per_km: float = Field(gt=0)
    airport_6_seater_rate_per_km: float = Field(gt=0)


class LocalFareRate(LocalFareRates):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    service_area: str


class PricingConfig(BaseModel):
    mumbai_local: Optional[LocalFareRate] = None
    cities: List[CityOut] = []
    routes: List[RouteOut] = []


class LoadReport(BaseModel):
    cities_loaded: bool
    routes_loaded: bool
    local_fares_loaded: bool
    errors: List[str] = []
