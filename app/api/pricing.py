from fastapi import APIRouter, Depends

from app.core.dependencies import get_pricing_store
from app.core.security import get_current_admin
from app.schemas.pricing import LoadReport, PricingConfig
from app.services.pricing_store import PricingStore

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/", response_model=PricingConfig)
async def get_pricing(store: PricingStore = Depends(get_pricing_store)):
    return store.config


@router.post("/reload", response_model=LoadReport)
async def reload_pricing(
    store: PricingStore = Depends(get_pricing_store),
    admin=Depends(get_current_admin),
):
    return await store.load()
