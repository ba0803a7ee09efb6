from .day_plan import DayPlan
from .enums import (
    CategoryTag,
    EntityType,
    MEAL_SLOTS,
    ScheduleStatus,
    TIME_OF_DAY_ORDER,
    TimeOfDay,
    TransportType,
)
from .place import Place
from .transport import Transport
from .trip import Trip

__all__ = [
    "CategoryTag",
    "DayPlan",
    "EntityType",
    "MEAL_SLOTS",
    "Place",
    "ScheduleStatus",
    "TIME_OF_DAY_ORDER",
    "TimeOfDay",
    "Transport",
    "TransportType",
    "Trip",
]
