from pydantic import BaseModel, ConfigDict


class CityCreate(BaseModel):
    name: str


class CityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
