import sys
import uuid
import psycopg2
from app.core.config import settings
from urllib.parse import urlparse

DEFAULT_RATES = {
    "normal_4_seater_rate_per_km": 15,
    "normal_6_seater_rate_per_km": 20,
    "airport_4_seater_rate_per_km": 18,
    "airport_6_seater_rate_per_km": 25,
}


def seed_local_fares(service_area: str, rates: dict) -> bool:
    try:
        db_url = urlparse(settings.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://"))

        conn = psycopg2.connect(
            host=db_url.hostname or "localhost",
            port=db_url.port or 5432,
            user=db_url.username or "postgres",
            password=db_url.password or "postgres",
            database=db_url.path.lstrip("/") or "postgres"
        )

        cursor = conn.cursor()

        cursor.execute("SELECT id FROM local_fares WHERE service_area = %s", (service_area,))
        existing = cursor.fetchone()

        if existing:
            print(f"Error: local fares for '{service_area}' already exist")
            cursor.close()
            conn.close()
            return False

        cursor.execute(
            "INSERT INTO local_fares (id, service_area, normal_4_seater_rate_per_km, "
            "normal_6_seater_rate_per_km, airport_4_seater_rate_per_km, airport_6_seater_rate_per_km) "
            "VALUES (%s, %s, %s, %s, %s, %s) RETURNING id",
            (
                str(uuid.uuid4()),
                service_area,
                rates["normal_4_seater_rate_per_km"],
                rates["normal_6_seater_rate_per_km"],
                rates["airport_4_seater_rate_per_km"],
                rates["airport_6_seater_rate_per_km"],
            )
        )

        row_id = cursor.fetchone()[0]
        conn.commit()

        print(f"Local fares for '{service_area}' created successfully")
        print(f"Row ID: {row_id}")
        for field, value in rates.items():
            print(f"{field}: {value}")

        cursor.close()
        conn.close()
        return True

    except Exception as e:
        print(f"Error seeding local fares: {str(e)}")
        return False


def main():
    rates = dict(DEFAULT_RATES)
    if len(sys.argv) == 5:
        try:
            values = [float(v) for v in sys.argv[1:5]]
        except ValueError:
            print("Error: rates must be numbers")
            sys.exit(1)
        if any(v <= 0 for v in values):
            print("Error: rates must be positive")
            sys.exit(1)
        rates = dict(zip(DEFAULT_RATES, values))
    elif len(sys.argv) != 1:
        print("Usage: python seed_local_fares.py [normal_4 normal_6 airport_4 airport_6]")
        sys.exit(1)

    success = seed_local_fares(settings.SERVICE_AREA, rates)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
