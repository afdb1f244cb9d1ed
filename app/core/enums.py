from enum import Enum


class CarType(str, Enum):
    FOUR_SEATER = "4-seater"
    SIX_SEATER = "6-seater"

    def __str__(self):
        return self.value


class TripType(str, Enum):
    NORMAL = "normal"
    AIRPORT = "airport"

    def __str__(self):
        return self.value


class ErrorKind(str, Enum):
    CONFLICT = "conflict"
    TRANSIENT_FAILURE = "transient_failure"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"

    def __str__(self):
        return self.value


class DistanceSource(str, Enum):
    SERVICE = "service"
    FALLBACK = "fallback"

    def __str__(self):
        return self.value


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    def __str__(self):
        return self.value
