"""Derive the day plans of a trip from its date window."""

import logging
from datetime import date, timedelta
from typing import Union

from .state import DayPlanState, Transition, TripDates, TripState

logger = logging.getLogger(__name__)

DateLike = Union[date, str]


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def trip_date_range(start_date: DateLike, end_date: DateLike) -> list[date]:
    """
    Every calendar day from `start_date` to `end_date`, inclusive.

    An inverted window yields no days; rejecting it is up to the caller.
    """
    start = _as_date(start_date)
    end = _as_date(end_date)
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def initialize_day_plans(state: TripState, trip: TripDates) -> Transition:
    """
    Create one empty day plan per trip day, unless the trip already has any.

    Existing day plans are never reconciled with later changes to the trip
    dates.
    """
    if state.day_plans_for_trip(trip.id):
        return Transition.unchanged(state)

    new_plans = [
        DayPlanState(trip_id=trip.id, plan_date=day)
        for day in trip_date_range(trip.start_date, trip.end_date)
    ]
    if not new_plans:
        logger.warning(
            f"Trip {trip.id} has no days between {trip.start_date} and {trip.end_date}"
        )
        return Transition.unchanged(state)

    return Transition(
        state=state.updated(day_plans=new_plans),
        day_plan_ids=frozenset(dp.id for dp in new_plans),
    )
