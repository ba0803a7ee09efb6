"""Planner commands and the translation of drag-and-drop results into them."""

import logging
import re
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models.enums import EntityType, TimeOfDay

logger = logging.getLogger(__name__)

UNSCHEDULED_DROPPABLE_ID = "droppable-unscheduled"

_DAY_DROPPABLE_RE = re.compile(
    r"^droppable-day-(?P<day_plan_id>.+)-(?P<time_of_day>"
    + "|".join(tod.value for tod in TimeOfDay)
    + r")$"
)
_DAY_TRANSPORT_RE = re.compile(r"-transport-(?P<entity_id>[^-].*)$")
_DAY_PLACE_RE = re.compile(r"-place-(?P<entity_id>[^-].*)$")


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True)


class ScheduleCommand(_Command):
    op: Literal["schedule"] = "schedule"
    entity_id: str
    entity_type: EntityType
    day_plan_id: str
    section_index: int = 0
    time_of_day: TimeOfDay = TimeOfDay.morning


class UnscheduleCommand(_Command):
    op: Literal["unschedule"] = "unschedule"
    entity_id: str
    entity_type: EntityType
    day_plan_id: Optional[str] = None


class ReorderInDayCommand(_Command):
    op: Literal["reorder_in_day"] = "reorder_in_day"
    day_plan_id: str
    entity_id: str
    dest_section_index: int
    time_of_day: TimeOfDay = TimeOfDay.morning


class MoveBetweenDaysCommand(_Command):
    op: Literal["move_between_days"] = "move_between_days"
    entity_id: str
    source_day_id: str
    dest_day_id: str
    dest_section_index: int
    time_of_day: TimeOfDay = TimeOfDay.morning


class ToggleLockCommand(_Command):
    op: Literal["toggle_lock"] = "toggle_lock"
    entity_id: str
    day_plan_id: str


class ClearDayCommand(_Command):
    op: Literal["clear_day"] = "clear_day"
    day_plan_id: str


Command = Annotated[
    Union[
        ScheduleCommand,
        UnscheduleCommand,
        ReorderInDayCommand,
        MoveBetweenDaysCommand,
        ToggleLockCommand,
        ClearDayCommand,
    ],
    Field(discriminator="op"),
]


class DropLocation(BaseModel):
    """Where a drag started or ended: a droppable list and an index in it."""

    model_config = ConfigDict(frozen=True)

    droppable_id: str
    index: int


class DayDroppable(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_plan_id: str
    time_of_day: TimeOfDay


class DraggedEntity(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    entity_id: str


def parse_day_droppable(droppable_id: str) -> Optional[DayDroppable]:
    """Parse `droppable-day-{dayPlanId}-{timeOfDay}`; None for any other list."""
    match = _DAY_DROPPABLE_RE.match(droppable_id)
    if not match:
        return None
    return DayDroppable(
        day_plan_id=match["day_plan_id"],
        time_of_day=TimeOfDay(match["time_of_day"]),
    )


def parse_draggable(draggable_id: str) -> DraggedEntity:
    """
    Work out which entity a draggable id refers to.

    Pool cards are `pool-place-{id}`, `pool-transport-{id}` or the older
    `pool-{id}`; day cards are `{dayPlanId}-place-{id}` or
    `{dayPlanId}-transport-{id}`. Anything unrecognised is a place id.
    """
    for prefix, entity_type in (
        ("pool-transport-", EntityType.transport),
        ("pool-place-", EntityType.place),
        ("pool-", EntityType.place),
    ):
        if draggable_id.startswith(prefix):
            return DraggedEntity(
                entity_type=entity_type, entity_id=draggable_id[len(prefix):]
            )

    for pattern, entity_type in (
        (_DAY_TRANSPORT_RE, EntityType.transport),
        (_DAY_PLACE_RE, EntityType.place),
    ):
        match = pattern.search(draggable_id)
        if match:
            return DraggedEntity(entity_type=entity_type, entity_id=match["entity_id"])

    for prefix, entity_type in (
        ("transport-", EntityType.transport),
        ("place-", EntityType.place),
    ):
        if draggable_id.startswith(prefix):
            return DraggedEntity(
                entity_type=entity_type, entity_id=draggable_id[len(prefix):]
            )

    return DraggedEntity(entity_type=EntityType.place, entity_id=draggable_id)


def resolve_drop(
    draggable_id: str,
    source: DropLocation,
    destination: Optional[DropLocation],
) -> Optional[Command]:
    """
    Turn a finished drag into the planner command it stands for.

    Returns None for drops outside any list, drops back onto the same spot,
    and combinations that mean nothing to the planner (pool to pool).
    """
    if destination is None:
        return None
    if source == destination:
        return None

    dragged = parse_draggable(draggable_id)
    src_day = parse_day_droppable(source.droppable_id)
    dest_day = parse_day_droppable(destination.droppable_id)
    from_pool = source.droppable_id == UNSCHEDULED_DROPPABLE_ID
    to_pool = destination.droppable_id == UNSCHEDULED_DROPPABLE_ID

    if from_pool and dest_day:
        return ScheduleCommand(
            entity_id=dragged.entity_id,
            entity_type=dragged.entity_type,
            day_plan_id=dest_day.day_plan_id,
            section_index=destination.index,
            time_of_day=dest_day.time_of_day,
        )
    if src_day and to_pool:
        return UnscheduleCommand(
            entity_id=dragged.entity_id,
            entity_type=dragged.entity_type,
            day_plan_id=src_day.day_plan_id,
        )
    if src_day and dest_day and src_day.day_plan_id == dest_day.day_plan_id:
        return ReorderInDayCommand(
            day_plan_id=src_day.day_plan_id,
            entity_id=dragged.entity_id,
            dest_section_index=destination.index,
            time_of_day=dest_day.time_of_day,
        )
    if src_day and dest_day:
        return MoveBetweenDaysCommand(
            entity_id=dragged.entity_id,
            source_day_id=src_day.day_plan_id,
            dest_day_id=dest_day.day_plan_id,
            dest_section_index=destination.index,
            time_of_day=dest_day.time_of_day,
        )

    logger.debug(
        f"Ignoring drop of {draggable_id} from {source.droppable_id} "
        f"to {destination.droppable_id}"
    )
    return None
