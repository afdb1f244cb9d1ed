from typing import List
from fastapi import APIRouter, Depends

from app.core.dependencies import get_pricing_store
from app.core.response_builders import build_mutation_response
from app.core.security import get_current_admin
from app.schemas.route import RouteCreate, RouteOut, RoutePriceUpdate
from app.services.pricing_store import PricingStore

router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("/", response_model=List[RouteOut])
async def list_routes(store: PricingStore = Depends(get_pricing_store)):
    return store.config.routes


@router.post("/", status_code=201)
async def add_route(
    payload: RouteCreate,
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    result = await store.add_route(
        payload.from_city,
        payload.to_city,
        payload.price_4_seater,
        payload.price_6_seater,
    )
    return build_mutation_response(result)


@router.put("/{route_id}")
async def update_route(
    route_id: str,
    payload: RoutePriceUpdate,
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    """Only prices can change; the city pair is fixed once created."""
    result = await store.update_route(route_id, payload.price_4_seater, payload.price_6_seater)
    return build_mutation_response(result)


@router.delete("/{route_id}")
async def delete_route(
    route_id: str,
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    return build_mutation_response(await store.delete_route(route_id))
