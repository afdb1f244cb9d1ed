from typing import List
from fastapi import APIRouter, Depends

from app.core.dependencies import get_pricing_store
from app.core.response_builders import build_mutation_response
from app.core.security import get_current_admin
from app.schemas.city import CityCreate, CityOut
from app.services.pricing_store import PricingStore

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get("/", response_model=List[CityOut])
async def list_cities(store: PricingStore = Depends(get_pricing_store)):
    return store.config.cities


@router.post("/", status_code=201)
async def add_city(
    payload: CityCreate,
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    return build_mutation_response(await store.add_city(payload.name))


@router.delete("/{city_id}")
async def remove_city(
    city_id: str,
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    return build_mutation_response(await store.remove_city(city_id))
