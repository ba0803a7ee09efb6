from .days import initialize_day_plans, trip_date_range
from .errors import (
    DuplicateEntityError,
    InvariantViolation,
    MealSlotConflictError,
    PlannerError,
    ProtectedFieldError,
)
from .state import (
    DayPlanItem,
    DayPlanState,
    PlaceRef,
    PlaceState,
    TransportRef,
    TransportState,
    Transition,
    TripDates,
    TripState,
)

__all__ = [
    "DayPlanItem",
    "DayPlanState",
    "DuplicateEntityError",
    "InvariantViolation",
    "MealSlotConflictError",
    "PlaceRef",
    "PlaceState",
    "PlannerError",
    "ProtectedFieldError",
    "TransportRef",
    "TransportState",
    "Transition",
    "TripDates",
    "TripState",
    "initialize_day_plans",
    "trip_date_range",
]
