"""In-memory pricing configuration backed by the table store.

The aggregate is only changed after the matching remote write succeeds.
The one exception is replace_local_rates, which writes memory and the local
cache first so an operator's rate change survives a database outage.
Cities and routes are never cached outside the database.

Cities are ordered by exact name and routes by (from_city, to_city), in
Python string order, both on load and after each mutation.
"""
import logging
from typing import List, Optional

from app.core.config import settings
from app.core.enums import ErrorKind
from app.core.local_cache import LocalCache
from app.core.results import StoreError, StoreResult
from app.schemas.pricing import LocalFareRate, LocalFareRates, LoadReport, PricingConfig
from app.services.table_store import TableStore

logger = logging.getLogger(__name__)


def _city_key(city):
    return city.name


def _route_key(route):
    return (route.from_city, route.to_city)


class PricingStore:
    def __init__(
        self,
        table_store: TableStore,
        cache: LocalCache,
        service_area: Optional[str] = None,
    ):
        self.table_store = table_store
        self.cache = cache
        self.service_area = service_area or settings.SERVICE_AREA
        self.config = PricingConfig()

    @property
    def local_rates(self) -> Optional[LocalFareRate]:
        return self.config.mumbai_local

    async def restore_cached_rates(self) -> bool:
        """Seed the local-rate slice from the cache snapshot, if one exists."""
        snapshot = await self.cache.get_json(settings.PRICING_CACHE_KEY)
        if not snapshot:
            return False
        try:
            rates = LocalFareRate.model_validate(snapshot)
        except ValueError as e:
            logger.warning(f"Ignoring invalid cached local fares: {e}")
            return False
        if rates.service_area != self.service_area:
            logger.warning(
                f"Cached local fares are for {rates.service_area}, expected {self.service_area}"
            )
            return False
        self.config.mumbai_local = rates
        logger.info(f"Restored cached local fares for {self.service_area}")
        return True

    async def load(self) -> LoadReport:
        errors: List[str] = []

        cities_loaded = True
        try:
            self.config.cities = sorted(await self.table_store.select_cities(), key=_city_key)
        except StoreError as e:
            cities_loaded = False
            errors.append(e.message)
            logger.error(f"Error fetching cities: {e.message}")

        routes_loaded = True
        try:
            self.config.routes = sorted(await self.table_store.select_routes(), key=_route_key)
        except StoreError as e:
            routes_loaded = False
            errors.append(e.message)
            logger.error(f"Error fetching routes: {e.message}")

        fares_loaded = True
        try:
            rates = await self.table_store.select_local_fare(self.service_area)
            if rates is None:
                logger.warning(f"No local fare row for {self.service_area}")
            else:
                self.config.mumbai_local = rates
                await self._write_rates_snapshot(rates)
        except StoreError as e:
            fares_loaded = False
            errors.append(e.message)
            logger.error(f"Error fetching local fares: {e.message}")

        return LoadReport(
            cities_loaded=cities_loaded,
            routes_loaded=routes_loaded,
            local_fares_loaded=fares_loaded,
            errors=errors,
        )

    async def add_city(self, name: str) -> StoreResult:
        name = (name or "").strip()
        if not name:
            return StoreResult.failure(ErrorKind.VALIDATION_ERROR, "City name is required")

        try:
            city = await self.table_store.insert_city(name)
        except StoreError as e:
            logger.error(f"Error adding city {name!r}: {e.message} (code={e.code})")
            if e.kind == ErrorKind.CONFLICT:
                return StoreResult.failure(ErrorKind.CONFLICT, "City already exists")
            return StoreResult.failure(ErrorKind.TRANSIENT_FAILURE, "Failed to add city")

        self.config.cities = sorted(self.config.cities + [city], key=_city_key)
        logger.info(f"City added: {city.name}")
        return StoreResult.success("City added successfully", city)

    async def remove_city(self, city_id: str) -> StoreResult:
        try:
            await self.table_store.delete_city(city_id)
        except StoreError as e:
            logger.error(f"Error removing city {city_id}: {e.message}")
            return StoreResult.failure(e.kind, "Failed to remove city")

        self.config.cities = [c for c in self.config.cities if c.id != city_id]
        logger.info(f"City removed: {city_id}")
        return StoreResult.success("City removed successfully")

    async def add_route(
        self,
        from_city: str,
        to_city: str,
        price_4_seater: float,
        price_6_seater: float,
    ) -> StoreResult:
        from_city = (from_city or "").strip()
        to_city = (to_city or "").strip()
        if not from_city or not to_city:
            return StoreResult.failure(ErrorKind.VALIDATION_ERROR, "Both cities are required")

        try:
            route = await self.table_store.insert_route(
                from_city, to_city, price_4_seater, price_6_seater
            )
        except StoreError as e:
            logger.error(f"Error adding route {from_city} -> {to_city}: {e.message} (code={e.code})")
            if e.kind == ErrorKind.CONFLICT:
                return StoreResult.failure(ErrorKind.CONFLICT, "Route already exists")
            return StoreResult.failure(ErrorKind.TRANSIENT_FAILURE, "Failed to add route")

        routes = [r for r in self.config.routes if _route_key(r) != _route_key(route)]
        routes.append(route)
        self.config.routes = sorted(routes, key=_route_key)
        logger.info(f"Route added: {route.from_city} -> {route.to_city}")
        return StoreResult.success("Route added successfully", route)

    async def update_route(
        self, route_id: str, price_4_seater: float, price_6_seater: float
    ) -> StoreResult:
        try:
            route = await self.table_store.update_route_prices(
                route_id, price_4_seater, price_6_seater
            )
        except StoreError as e:
            logger.error(f"Error updating route {route_id}: {e.message}")
            if e.kind == ErrorKind.NOT_FOUND:
                return StoreResult.failure(ErrorKind.NOT_FOUND, "Route not found")
            return StoreResult.failure(ErrorKind.TRANSIENT_FAILURE, "Failed to update route")

        self.config.routes = [route if r.id == route_id else r for r in self.config.routes]
        logger.info(f"Route updated: {route_id}")
        return StoreResult.success("Route updated successfully", route)

    async def delete_route(self, route_id: str) -> StoreResult:
        try:
            await self.table_store.delete_route(route_id)
        except StoreError as e:
            logger.error(f"Error deleting route {route_id}: {e.message}")
            return StoreResult.failure(e.kind, "Failed to delete route")

        self.config.routes = [r for r in self.config.routes if r.id != route_id]
        logger.info(f"Route deleted: {route_id}")
        return StoreResult.success("Route deleted successfully")

    async def replace_local_rates(self, rates: LocalFareRates) -> StoreResult:
        previous = self.config.mumbai_local
        local = LocalFareRate(
            id=previous.id if previous else None,
            service_area=self.service_area,
            **rates.model_dump(include=set(LocalFareRates.model_fields)),
        )
        self.config.mumbai_local = local
        await self._write_rates_snapshot(local)

        try:
            saved = await self.table_store.upsert_local_fare(self.service_area, local)
        except StoreError as e:
            logger.error(f"Error saving local fares for {self.service_area}: {e.message}")
            return StoreResult(
                ok=False,
                message="Local fares saved locally but failed to sync",
                kind=ErrorKind.TRANSIENT_FAILURE,
                value=local,
            )

        self.config.mumbai_local = saved
        await self._write_rates_snapshot(saved)
        logger.info(f"Local fares updated for {self.service_area}")
        return StoreResult.success("Local fares updated successfully", saved)

    async def _write_rates_snapshot(self, rates: LocalFareRate) -> None:
        await self.cache.set_json(settings.PRICING_CACHE_KEY, rates.model_dump())
