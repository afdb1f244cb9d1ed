from fastapi import Request

from app.core.local_cache import LocalCache
from app.services.pricing_store import PricingStore


def get_pricing_store(request: Request) -> PricingStore:
    return request.app.state.pricing_store


def get_local_cache(request: Request) -> LocalCache:
    return request.app.state.local_cache
