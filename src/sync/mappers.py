"""Conversions between planner state and database rows.

This is the storage boundary: legacy data is normalized here on the way in
(category renames, missing time-of-day, null id lists) so the planner never
has to guess.
"""

from typing import Any, Mapping

from models import DayPlan, Place, Transport, Trip
from models.enums import TimeOfDay
from planner.state import (
    DayPlanItem,
    DayPlanState,
    PlaceRef,
    PlaceState,
    TransportRef,
    TransportState,
    TripDates,
)


_OPTIONAL_ITEM_KEYS = {"start_time": "startTime", "end_time": "endTime", "notes": "notes"}


def item_to_json(item: DayPlanItem) -> dict[str, Any]:
    ref_key = "placeId" if isinstance(item.ref, PlaceRef) else "transportId"
    data: dict[str, Any] = {
        "id": item.id,
        ref_key: item.entity_id,
        "order": item.order,
        "timeOfDay": item.time_of_day.value,
        "locked": item.locked,
    }
    for field, key in _OPTIONAL_ITEM_KEYS.items():
        value = getattr(item, field)
        if value is not None:
            data[key] = value
    return data


def item_from_json(data: Mapping[str, Any]) -> DayPlanItem:
    """
    Parse one stored placement.

    Raises:
        ValueError: If the placement names both a place and a transport, or neither
    """
    place_id = data.get("placeId")
    transport_id = data.get("transportId")
    if bool(place_id) == bool(transport_id):
        raise ValueError(
            f"Day plan item {data.get('id')!r} must reference exactly one of placeId or transportId"
        )
    ref = PlaceRef(entity_id=place_id) if place_id else TransportRef(entity_id=transport_id)
    return DayPlanItem(
        id=data["id"],
        ref=ref,
        order=data.get("order") or 0,
        time_of_day=TimeOfDay(data.get("timeOfDay") or TimeOfDay.morning.value),
        locked=bool(data.get("locked", False)),
        **{field: data.get(key) for field, key in _OPTIONAL_ITEM_KEYS.items()},
    )


def day_plan_to_row(day_plan: DayPlanState) -> DayPlan:
    return DayPlan(
        id=day_plan.id,
        trip_id=day_plan.trip_id,
        plan_date=day_plan.plan_date,
        items=[item_to_json(item) for item in sorted(day_plan.items, key=lambda i: i.order)],
        theme=day_plan.theme,
        notes=day_plan.notes,
    )


def row_to_day_plan(row: DayPlan) -> DayPlanState:
    return DayPlanState(
        id=row.id,
        trip_id=row.trip_id,
        plan_date=row.plan_date,
        items=tuple(item_from_json(data) for data in row.items or []),
        theme=row.theme,
        notes=row.notes,
    )


def place_to_row(place: PlaceState) -> Place:
    return Place(
        id=place.id,
        trip_id=place.trip_id,
        name=place.name,
        categories=sorted(tag.value for tag in place.categories),
        address=place.address,
        notes=place.notes,
        schedule_status=place.schedule_status.value,
        scheduled_day_ids=sorted(place.scheduled_day_ids),
    )


def row_to_place(row: Place) -> PlaceState:
    place = PlaceState(
        id=row.id,
        trip_id=row.trip_id,
        name=row.name,
        categories=row.categories or [],
        address=row.address,
        notes=row.notes,
    )
    return place.with_day_ids(row.scheduled_day_ids or [])


def transport_to_row(transport: TransportState) -> Transport:
    return Transport(
        id=transport.id,
        trip_id=transport.trip_id,
        transport_type=transport.transport_type.value,
        origin=transport.origin,
        destination=transport.destination,
        departure_time=transport.departure_time,
        duration_minutes=transport.duration_minutes,
        notes=transport.notes,
        schedule_status=transport.schedule_status.value,
        scheduled_day_ids=sorted(transport.scheduled_day_ids),
    )


def row_to_transport(row: Transport) -> TransportState:
    transport = TransportState(
        id=row.id,
        trip_id=row.trip_id,
        transport_type=row.transport_type,
        origin=row.origin,
        destination=row.destination,
        departure_time=row.departure_time,
        duration_minutes=row.duration_minutes,
        notes=row.notes,
    )
    return transport.with_day_ids(row.scheduled_day_ids or [])


def schedule_fields(entity: PlaceState | TransportState) -> dict[str, Any]:
    """The two columns written when only an entity's placement changed."""
    return {
        "schedule_status": entity.schedule_status.value,
        "scheduled_day_ids": sorted(entity.scheduled_day_ids),
    }


def row_to_trip_dates(row: Trip) -> TripDates:
    return TripDates(id=row.id, start_date=row.start_date, end_date=row.end_date)
