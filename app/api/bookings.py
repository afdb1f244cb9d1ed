from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_pricing_store
from app.core.response_builders import STATUS_BY_KIND
from app.schemas.booking import BookingOut, BookingRequest
from app.services.booking import BookingError, submit_booking
from app.services.pricing_store import PricingStore

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("/", response_model=BookingOut, status_code=201)
async def create_booking(
    payload: BookingRequest,
    store: PricingStore = Depends(get_pricing_store),
):
    try:
        return await submit_booking(payload, store)
    except BookingError as e:
        raise HTTPException(status_code=STATUS_BY_KIND.get(e.kind, 503), detail=e.message)
