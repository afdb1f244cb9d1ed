from pydantic import BaseModel, ConfigDict, Field, model_validator


class RouteCreate(BaseModel):
    from_city: str = Field(min_length=1)
    to_city: str = Field(min_length=1)
    price_4_seater: float = Field(gt=0)
    price_6_seater: float = Field(gt=0)

    @model_validator(mode="after")
    def check_distinct_cities(self):
        if self.from_city.strip().lower() == self.to_city.strip().lower():
            raise ValueError("from_city and to_city must differ")
        return self


class RoutePriceUpdate(BaseModel):
    price_4_seater: float = Field(gt=0)
    price_6_seater: float = Field(gt=0)


class RouteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    from_city: str
    to_city: str
    price_4_seater: float
    price_6_seater: float
