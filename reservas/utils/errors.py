import os

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

# SQLSTATE de PostgreSQL: unique_violation y exclusion_violation
UNIQUE_VIOLATION = "23505"
EXCLUSION_VIOLATION = "23P01"


class BookingError(ValueError):
    """Error de negocio al crear o modificar una reserva."""


class InvalidBookingError(BookingError):
    pass


class SlotConflictError(BookingError):
    def __init__(self, message: str = "Time slot already booked or overlapping", conflicts=None):
        super().__init__(message)
        self.conflicts = conflicts or []


class OutsideWorkingHoursError(SlotConflictError):
    pass


class ResourceNotFoundError(LookupError):
    pass


def is_conflict_error(exc: IntegrityError) -> bool:
    """
    Indica si un IntegrityError corresponde a una violación de unicidad o
    exclusión (reserva duplicada o solapada).
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code in (UNIQUE_VIOLATION, EXCLUSION_VIOLATION):
        return True
    message = str(orig or exc)
    return "UNIQUE constraint failed" in message


def is_production() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def to_http_exception(exc: Exception) -> HTTPException:
    """Traduce los errores de negocio de reservas a respuestas HTTP."""
    if isinstance(exc, ResourceNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, SlotConflictError):
        detail = {"message": str(exc), "conflicts": exc.conflicts}
        return HTTPException(status_code=409, detail=detail)
    return HTTPException(status_code=400, detail=str(exc))
