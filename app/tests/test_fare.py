import pytest
from app.core.enums import CarType, TripType
from app.schemas.fare import Coordinates
from app.schemas.pricing import LocalFareRates
from app.services.fare import compute_fare, haversine_km, round_half_up, select_rate


@pytest.fixture
def rates():
    return LocalFareRates(
        normal_4_seater_rate_per_km=15,
        normal_6_seater_rate_per_km=18,
        airport_4_seater_rate_per_km=18,
        airport_6_seater_rate_per_km=22,
    )


class TestRateSelection:

    @pytest.mark.parametrize("trip_type,car_type,field", [
        (TripType.NORMAL, CarType.FOUR_SEATER, "normal_4_seater_rate_per_km"),
        (TripType.NORMAL, CarType.SIX_SEATER, "normal_6_seater_rate_per_km"),
        (TripType.AIRPORT, CarType.FOUR_SEATER, "airport_4_seater_rate_per_km"),
        (TripType.AIRPORT, CarType.SIX_SEATER, "airport_6_seater_rate_per_km"),
    ])
    def test_each_combination_picks_its_field(self, trip_type, car_type, field):
        rates = LocalFareRates(
            normal_4_seater_rate_per_km=11,
            normal_6_seater_rate_per_km=12,
            airport_4_seater_rate_per_km=13,
            airport_6_seater_rate_per_km=14,
        )
        assert select_rate(rates, car_type, trip_type) == getattr(rates, field)

    def test_accepts_plain_strings(self, rates):
        assert select_rate(rates, "6-seater", "airport") == 22


class TestComputeFare:

    def test_normal_four_seater(self, rates):
        fare = compute_fare(40, CarType.FOUR_SEATER, TripType.NORMAL, rates)
        assert fare.rate_per_km == 15
        assert fare.total == 600
        assert fare.is_minimum_fare is False

    def test_airport_four_seater(self, rates):
        fare = compute_fare(40, CarType.FOUR_SEATER, TripType.AIRPORT, rates)
        assert fare.rate_per_km == 18
        assert fare.total == 720
        assert fare.is_minimum_fare is False

    def test_short_trip_clamped_to_minimum(self, rates):
        fare = compute_fare(2, CarType.FOUR_SEATER, TripType.NORMAL, rates)
        assert fare.rate_per_km == 15
        assert fare.total == 100
        assert fare.is_minimum_fare is True

    def test_exactly_minimum_is_not_flagged(self, rates):
        # 5 km * 20/km = 100
        rates = rates.model_copy(update={"normal_4_seater_rate_per_km": 20})
        fare = compute_fare(5, CarType.FOUR_SEATER, TripType.NORMAL, rates)
        assert fare.total == 100
        assert fare.is_minimum_fare is False

    def test_total_rounds_half_up(self, rates):
        # 10.5 km * 15 = 157.5
        fare = compute_fare(10.5, CarType.FOUR_SEATER, TripType.NORMAL, rates)
        assert fare.total == 158

    @pytest.mark.parametrize("distance", [0.5, 3.3, 6.66, 12.34, 40, 123.45])
    @pytest.mark.parametrize("car_type", list(CarType))
    @pytest.mark.parametrize("trip_type", list(TripType))
    def test_total_is_floored_product(self, rates, distance, car_type, trip_type):
        rate = select_rate(rates, car_type, trip_type)
        raw = int(round_half_up(distance * rate))
        fare = compute_fare(distance, car_type, trip_type, rates)
        assert fare.total == max(100, raw)
        assert fare.is_minimum_fare == (raw < 100)

    def test_zero_distance_is_not_ready(self, rates):
        assert compute_fare(0, CarType.FOUR_SEATER, TripType.NORMAL, rates) is None

    def test_missing_rates_is_not_ready(self):
        assert compute_fare(40, CarType.FOUR_SEATER, TripType.NORMAL, None) is None

    def test_custom_minimum_fare(self, rates):
        fare = compute_fare(2, CarType.FOUR_SEATER, TripType.NORMAL, rates, minimum_fare=50)
        assert fare.total == 50
        assert fare.is_minimum_fare is True


class TestHaversine:

    def test_identical_points(self):
        point = Coordinates(lat=19.076, lng=72.8777)
        assert haversine_km(point, point) == 0

    def test_mumbai_to_pune(self):
        mumbai = Coordinates(lat=19.0760, lng=72.8777)
        pune = Coordinates(lat=18.5204, lng=73.8567)
        assert haversine_km(mumbai, pune) == pytest.approx(120.1, abs=1.0)

    def test_near_antipodal_points(self):
        # half the Earth's circumference is pi * 6371 = 20015.09 km
        a = Coordinates(lat=0, lng=0)
        b = Coordinates(lat=0, lng=180)
        assert haversine_km(a, b) == pytest.approx(20015.09, abs=0.01)

    def test_result_has_two_decimals(self):
        a = Coordinates(lat=19.0596, lng=72.8295)
        b = Coordinates(lat=19.1136, lng=72.8697)
        distance = haversine_km(a, b)
        assert round(distance, 2) == distance

    def test_symmetric(self):
        a = Coordinates(lat=19.0596, lng=72.8295)
        b = Coordinates(lat=19.1136, lng=72.8697)
        assert haversine_km(a, b) == haversine_km(b, a)
