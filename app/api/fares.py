"""Local fare rates and fare estimation"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from app.core.dependencies import get_pricing_store
from app.core.response_builders import build_mutation_response
from app.core.security import get_current_admin
from app.schemas.fare import Coordinates, DistanceEstimate, FareEstimateRequest, FareEstimateResponse
from app.schemas.pricing import LocalFareRate, LocalFareRates
from app.services.fare import compute_fare, estimate_distance
from app.services.pricing_store import PricingStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/fares", tags=["fares"])


@router.get("/local", response_model=LocalFareRate)
async def get_local_rates(store: PricingStore = Depends(get_pricing_store)):
    if store.local_rates is None:
        raise HTTPException(status_code=404, detail="Local fares are not configured")
    return store.local_rates


@router.put("/local")
async def replace_local_rates(
    payload: LocalFareRates,
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    result = await store.replace_local_rates(payload)
    if not result.ok and result.value is not None:
        # kept locally, remote sync pending
        return JSONResponse(
            status_code=202,
            content={"ok": False, "message": result.message, "data": result.value.model_dump()},
        )
    return build_mutation_response(result)


@router.get("/distance", response_model=DistanceEstimate)
async def distance(
    origins: str = Query(..., description="lat,lng"),
    destinations: str = Query(..., description="lat,lng"),
):
    try:
        pickup = _parse_coordinates(origins)
        drop = _parse_coordinates(destinations)
    except ValueError:
        raise HTTPException(status_code=422, detail="Coordinates must be given as lat,lng")
    return await estimate_distance(pickup, drop)


@router.post("/estimate", response_model=FareEstimateResponse)
async def estimate_fare(
    payload: FareEstimateRequest,
    store: PricingStore = Depends(get_pricing_store),
):
    distance_estimate = await estimate_distance(payload.pickup, payload.drop)
    fare = compute_fare(
        distance_estimate.distance_km,
        payload.car_type,
        payload.trip_type,
        store.local_rates,
    )
    return FareEstimateResponse(distance=distance_estimate, fare=fare, ready=fare is not None)


def _parse_coordinates(raw: str) -> Coordinates:
    lat, lng = raw.split(",")
    return Coordinates(lat=float(lat), lng=float(lng))
