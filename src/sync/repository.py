"""Reading a trip's planner state from the database and deleting trips."""

import logging
from typing import Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from models import DayPlan, Place, Transport, Trip
from models.enums import MEAL_SLOTS, TimeOfDay
from planner.sections import renumber, sort_items
from planner.state import (
    DayPlanItem,
    DayPlanState,
    PlaceRef,
    PlaceState,
    TransportState,
    TripDates,
    TripState,
)
from .mappers import (
    row_to_day_plan,
    row_to_place,
    row_to_transport,
    row_to_trip_dates,
)

logger = logging.getLogger(__name__)


async def get_trip_dates(session: AsyncSession, trip_id: str) -> Optional[TripDates]:
    trip = await session.get(Trip, trip_id)
    return row_to_trip_dates(trip) if trip else None


def _repair_items(
    day_plan: DayPlanState,
    places: dict[str, PlaceState],
    transports: dict[str, TransportState],
) -> list[DayPlanItem]:
    """
    Drop the stored items of a day that the planner cannot accept.

    That is items of deleted entities, items whose reference kind does not
    match the entity, repeated placements of one entity, and meal slot items
    that are not the first restaurant of their slot.
    """
    kept: list[DayPlanItem] = []
    seen: set[str] = set()
    meal_slots_taken: set[TimeOfDay] = set()

    for item in sort_items(day_plan.items):
        store = places if isinstance(item.ref, PlaceRef) else transports
        entity = store.get(item.entity_id)
        if entity is None:
            if item.entity_id in places or item.entity_id in transports:
                reason = f"it references {item.entity_type.value} {item.entity_id} of the other kind"
            else:
                reason = f"entity {item.entity_id} no longer exists"
            logger.warning(f"Dropping item {item.id} of day {day_plan.id}: {reason}")
            continue
        if item.entity_id in seen:
            logger.warning(
                f"Dropping duplicate placement of {item.entity_id} in day {day_plan.id}"
            )
            continue
        if item.time_of_day in MEAL_SLOTS:
            if not isinstance(entity, PlaceState) or not entity.is_restaurant:
                logger.warning(
                    f"Dropping item {item.id} of day {day_plan.id}: "
                    f"{item.entity_id} is not a restaurant but sits in {item.time_of_day.value}"
                )
                continue
            if item.time_of_day in meal_slots_taken:
                logger.warning(
                    f"Dropping item {item.id} of day {day_plan.id}: "
                    f"{item.time_of_day.value} already holds a restaurant"
                )
                continue
            meal_slots_taken.add(item.time_of_day)

        seen.add(item.entity_id)
        kept.append(item)
    return kept


async def load_trip_state(session: AsyncSession, trip_id: str) -> TripState:
    """
    Load the places, transports and day plans of a trip.

    Day plans are the source of truth for placements: item orders are
    renumbered densely, and entity schedule fields that disagree with the day
    plans (e.g. after a dropped sync write) are rebuilt from them.
    """
    day_plan_rows = (
        await session.exec(
            select(DayPlan).where(DayPlan.trip_id == trip_id).order_by(DayPlan.plan_date)
        )
    ).all()
    place_rows = (await session.exec(select(Place).where(Place.trip_id == trip_id))).all()
    transport_rows = (
        await session.exec(select(Transport).where(Transport.trip_id == trip_id))
    ).all()

    places = {row.id: row_to_place(row) for row in place_rows}
    transports = {row.id: row_to_transport(row) for row in transport_rows}

    day_plans = {}
    placements: dict[str, set[str]] = {}
    for row in day_plan_rows:
        day_plan = row_to_day_plan(row)

        kept = _repair_items(day_plan, places, transports)
        for item in kept:
            placements.setdefault(item.entity_id, set()).add(day_plan.id)

        day_plans[day_plan.id] = day_plan.model_copy(update={"items": renumber(kept)})

    for store in (places, transports):
        for entity_id, entity in store.items():
            expected = frozenset(placements.get(entity_id, set()))
            if entity.scheduled_day_ids != expected:
                logger.warning(
                    f"Rebuilding schedule of {entity.entity_type.value} {entity_id}: "
                    f"stored {sorted(entity.scheduled_day_ids)}, placed in {sorted(expected)}"
                )
            store[entity_id] = entity.with_day_ids(expected)

    logger.info(
        f"Loaded trip {trip_id}: {len(day_plans)} days, "
        f"{len(places)} places, {len(transports)} transports"
    )
    return TripState(
        trip_id=trip_id,
        places=places,
        transports=transports,
        day_plans=day_plans,
    )


async def delete_trip(session: AsyncSession, trip_id: str) -> None:
    """Delete a trip together with its day plans, places and transports."""
    for model in (DayPlan, Place, Transport):
        await session.execute(delete(model).where(model.trip_id == trip_id))
    await session.execute(delete(Trip).where(Trip.id == trip_id))
    await session.commit()
    logger.info(f"Deleted trip {trip_id}")
