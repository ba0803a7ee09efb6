"""Shared enumerations for trips, places and the daily planner."""

from enum import Enum


class TimeOfDay(str, Enum):
    morning = "morning"
    lunch = "lunch"
    afternoon = "afternoon"
    dinner = "dinner"
    night = "night"


# Display order of the sections within a day
TIME_OF_DAY_ORDER: tuple[TimeOfDay, ...] = tuple(TimeOfDay)

MEAL_SLOTS = frozenset({TimeOfDay.lunch, TimeOfDay.dinner})


class ScheduleStatus(str, Enum):
    unscheduled = "unscheduled"
    scheduled = "scheduled"


class EntityType(str, Enum):
    place = "place"
    transport = "transport"


class CategoryTag(str, Enum):
    restaurant = "restaurant"
    sightseeing = "sightseeing"
    shopping = "shopping"
    nightlife = "nightlife"
    culture = "culture"
    nature = "nature"
    adventure = "adventure"


# Tags renamed since older records were written
LEGACY_CATEGORY_ALIASES = {"food": CategoryTag.restaurant.value}


class TransportType(str, Enum):
    train = "train"
    bus = "bus"
    ferry = "ferry"
    taxi = "taxi"
    metro = "metro"
    rental_car = "rental_car"
