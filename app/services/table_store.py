"""Table-level CRUD over the cities, routes, local_fares and bookings tables.

Every method opens its own session, commits, and returns plain schema
objects. Database failures are raised as StoreError with a kind decided
from the driver's error code.
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.enums import ErrorKind
from app.core.metrics import track_db_operation
from app.core.results import StoreError
from app.models.booking import Booking
from app.models.city import City
from app.models.local_fare import LocalFare
from app.models.route import Route
from app.schemas.city import CityOut
from app.schemas.pricing import LocalFareRate, LocalFareRates
from app.schemas.route import RouteOut

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
# sqlite reports the bare constraint name when extended result codes are off
SQLITE_UNIQUE_VIOLATIONS = ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT")


def _error_code(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode", "sqlite_errorname"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def _translate(exc: Exception, message: str) -> StoreError:
    if isinstance(exc, IntegrityError):
        code = _error_code(exc)
        if code == UNIQUE_VIOLATION or code in SQLITE_UNIQUE_VIOLATIONS:
            return StoreError(ErrorKind.CONFLICT, message, code=code)
        return StoreError(ErrorKind.TRANSIENT_FAILURE, message, code=code)
    return StoreError(ErrorKind.TRANSIENT_FAILURE, message)


class TableStore:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def ping(self) -> bool:
        try:
            async with self.session_factory() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    @track_db_operation("select", "cities")
    async def select_cities(self) -> List[CityOut]:
        try:
            async with self.session_factory() as db:
                res = await db.execute(select(City).order_by(City.name))
                return [CityOut.model_validate(c) for c in res.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to load cities") from e

    @track_db_operation("insert", "cities")
    async def insert_city(self, name: str) -> CityOut:
        try:
            async with self.session_factory() as db:
                city = City(name=name)
                db.add(city)
                await db.commit()
                await db.refresh(city)
                return CityOut.model_validate(city)
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to add city") from e

    @track_db_operation("delete", "cities")
    async def delete_city(self, city_id: str) -> None:
        try:
            async with self.session_factory() as db:
                await db.execute(delete(City).where(City.id == city_id))
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to remove city") from e

    @track_db_operation("select", "routes")
    async def select_routes(self) -> List[RouteOut]:
        try:
            async with self.session_factory() as db:
                res = await db.execute(
                    select(Route).order_by(Route.from_city, Route.to_city)
                )
                return [RouteOut.model_validate(r) for r in res.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to load routes") from e

    @track_db_operation("insert", "routes")
    async def insert_route(
        self,
        from_city: str,
        to_city: str,
        price_4_seater: float,
        price_6_seater: float,
    ) -> RouteOut:
        try:
            async with self.session_factory() as db:
                route = Route(
                    from_city=from_city,
                    to_city=to_city,
                    price_4_seater=price_4_seater,
                    price_6_seater=price_6_seater,
                )
                db.add(route)
                await db.commit()
                await db.refresh(route)
                return RouteOut.model_validate(route)
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to add route") from e

    @track_db_operation("update", "routes")
    async def update_route_prices(
        self, route_id: str, price_4_seater: float, price_6_seater: float
    ) -> RouteOut:
        try:
            async with self.session_factory() as db:
                route = await db.get(Route, route_id)
                if route is None:
                    raise StoreError(ErrorKind.NOT_FOUND, f"Route with id {route_id} not found")
                route.price_4_seater = price_4_seater
                route.price_6_seater = price_6_seater
                await db.commit()
                await db.refresh(route)
                return RouteOut.model_validate(route)
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to update route") from e

    @track_db_operation("delete", "routes")
    async def delete_route(self, route_id: str) -> None:
        try:
            async with self.session_factory() as db:
                await db.execute(delete(Route).where(Route.id == route_id))
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to delete route") from e

    @track_db_operation("select", "local_fares")
    async def select_local_fare(self, service_area: str) -> Optional[LocalFareRate]:
        try:
            async with self.session_factory() as db:
                res = await db.execute(
                    select(LocalFare).where(LocalFare.service_area == service_area)
                )
                row = res.scalars().first()
                return LocalFareRate.model_validate(row) if row else None
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to load local fares") from e

    @track_db_operation("upsert", "local_fares")
    async def upsert_local_fare(self, service_area: str, rates: LocalFareRates) -> LocalFareRate:
        values = rates.model_dump(include=set(LocalFareRates.model_fields))
        try:
            async with self.session_factory() as db:
                res = await db.execute(
                    select(LocalFare).where(LocalFare.service_area == service_area)
                )
                row = res.scalars().first()
                if row is None:
                    row = LocalFare(service_area=service_area, **values)
                    db.add(row)
                else:
                    for field, value in values.items():
                        setattr(row, field, value)
                await db.commit()
                await db.refresh(row)
                return LocalFareRate.model_validate(row)
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to save local fares") from e

    @track_db_operation("insert", "bookings")
    async def insert_booking(self, **fields) -> str:
        try:
            async with self.session_factory() as db:
                booking = Booking(**fields)
                db.add(booking)
                await db.commit()
                await db.refresh(booking)
                return booking.id
        except (SQLAlchemyError, OSError) as e:
            raise _translate(e, "Failed to save booking") from e
