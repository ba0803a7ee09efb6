"""Scheduling engine: pure state transitions of the daily planner.

Every operation takes a `TripState` and returns a `Transition`. Operations
never raise for structurally valid input: when a target is missing or a
meal-slot rule rejects the drop, the transition carries the unchanged state
so the caller can treat the gesture as "snapped back".
"""

from typing import Any, Iterable, Mapping, Optional, Union

from models.enums import MEAL_SLOTS, EntityType, TimeOfDay
from .errors import DuplicateEntityError, MealSlotConflictError, ProtectedFieldError
from .sections import insert_into_section, remove_entity as remove_from_items
from .sections import renumber, section_items, sort_items
from .state import (
    DayPlanItem,
    DayPlanState,
    Entity,
    PlaceState,
    Transition,
    TripState,
    make_ref,
)

EDITABLE_DAY_PLAN_FIELDS = frozenset({"theme", "notes"})
PROTECTED_ENTITY_FIELDS = frozenset(
    {"id", "trip_id", "schedule_status", "scheduled_day_ids"}
)


def _transition(
    state: TripState,
    day_plans: Iterable[DayPlanState] = (),
    entities: Iterable[Entity] = (),
) -> Transition:
    changed_days = [dp for dp in day_plans if state.day_plans.get(dp.id) != dp]
    changed_entities = [
        entity
        for entity in entities
        if state.get_entity(entity.id, entity.entity_type) != entity
    ]
    if not changed_days and not changed_entities:
        return Transition.unchanged(state)
    return Transition(
        state=state.updated(changed_days, changed_entities),
        day_plan_ids=frozenset(dp.id for dp in changed_days),
        entity_ids=frozenset(entity.id for entity in changed_entities),
    )


def slot_accepts(
    day_plan: DayPlanState,
    entity_id: str,
    entity: Optional[Entity],
    time_of_day: TimeOfDay,
) -> bool:
    """
    Whether `entity` may be dropped into `time_of_day` of `day_plan`.

    Meal slots take a single restaurant place. The entity already sitting in
    the slot does not count as an occupant of it.
    """
    if time_of_day not in MEAL_SLOTS:
        return True
    if not isinstance(entity, PlaceState) or not entity.is_restaurant:
        return False
    occupants = [
        item
        for item in section_items(day_plan.items, time_of_day)
        if not item.references(entity_id)
    ]
    return not occupants


def schedule(
    state: TripState,
    entity_id: str,
    entity_type: Union[EntityType, str],
    day_plan_id: str,
    section_index: int,
    time_of_day: Union[TimeOfDay, str] = TimeOfDay.morning,
) -> Transition:
    """Place an entity into a day at a position within a time-of-day section."""
    time_of_day = TimeOfDay(time_of_day)
    day_plan = state.day_plans.get(day_plan_id)
    entity = state.get_entity(entity_id, EntityType(entity_type))
    if day_plan is None or entity is None:
        return Transition.unchanged(state)
    if day_plan.contains(entity_id):
        return Transition.unchanged(state)
    if not slot_accepts(day_plan, entity_id, entity, time_of_day):
        return Transition.unchanged(state)

    new_item = DayPlanItem(
        ref=make_ref(entity.entity_type, entity_id),
        time_of_day=time_of_day,
    )
    items = insert_into_section(day_plan.items, new_item, section_index)
    return _transition(
        state,
        day_plans=[day_plan.model_copy(update={"items": items})],
        entities=[entity.with_day_ids(entity.scheduled_day_ids | {day_plan_id})],
    )


def unschedule(
    state: TripState,
    entity_id: str,
    entity_type: Union[EntityType, str],
    day_plan_id: Optional[str] = None,
) -> Transition:
    """
    Take an entity out of one day, or out of every day when no day is given.
    """
    entity = state.get_entity(entity_id, EntityType(entity_type))
    if entity is None:
        return Transition.unchanged(state)

    if day_plan_id is not None:
        day_plan = state.day_plans.get(day_plan_id)
        targets = [day_plan] if day_plan is not None else []
        remaining_ids = entity.scheduled_day_ids - {day_plan_id}
    else:
        targets = list(state.day_plans.values())
        remaining_ids = frozenset()

    new_day_plans = []
    for day_plan in targets:
        removed, items = remove_from_items(day_plan.items, entity_id)
        if removed is not None:
            new_day_plans.append(day_plan.model_copy(update={"items": items}))

    return _transition(
        state,
        day_plans=new_day_plans,
        entities=[entity.with_day_ids(remaining_ids)],
    )


def reorder_in_day(
    state: TripState,
    day_plan_id: str,
    entity_id: str,
    dest_section_index: int,
    time_of_day: Union[TimeOfDay, str] = TimeOfDay.morning,
) -> Transition:
    """Move a placed item to another position or section of the same day."""
    time_of_day = TimeOfDay(time_of_day)
    day_plan = state.day_plans.get(day_plan_id)
    if day_plan is None:
        return Transition.unchanged(state)
    item = day_plan.find_item(entity_id)
    if item is None:
        return Transition.unchanged(state)

    entity = state.get_entity(entity_id, item.entity_type)
    if not slot_accepts(day_plan, entity_id, entity, time_of_day):
        return Transition.unchanged(state)

    _, remaining = remove_from_items(day_plan.items, entity_id)
    moved = item.model_copy(update={"time_of_day": time_of_day})
    items = insert_into_section(remaining, moved, dest_section_index)
    return _transition(state, day_plans=[day_plan.model_copy(update={"items": items})])


def move_between_days(
    state: TripState,
    entity_id: str,
    source_day_id: str,
    dest_day_id: str,
    dest_section_index: int,
    time_of_day: Union[TimeOfDay, str] = TimeOfDay.morning,
) -> Transition:
    """
    Move a placement from one day to another in a single step.

    The entity ends up in the destination day instead of the source day. The
    move is rejected when the destination already holds the entity.
    """
    if source_day_id == dest_day_id:
        return reorder_in_day(
            state, source_day_id, entity_id, dest_section_index, time_of_day
        )

    time_of_day = TimeOfDay(time_of_day)
    source = state.day_plans.get(source_day_id)
    dest = state.day_plans.get(dest_day_id)
    if source is None or dest is None:
        return Transition.unchanged(state)
    item = source.find_item(entity_id)
    if item is None or dest.contains(entity_id):
        return Transition.unchanged(state)

    entity = state.get_entity(entity_id, item.entity_type)
    if not slot_accepts(dest, entity_id, entity, time_of_day):
        return Transition.unchanged(state)

    _, source_items = remove_from_items(source.items, entity_id)
    moved = item.model_copy(update={"time_of_day": time_of_day})
    dest_items = insert_into_section(dest.items, moved, dest_section_index)

    entities = []
    if entity is not None:
        entities.append(
            entity.with_day_ids((entity.scheduled_day_ids - {source_day_id}) | {dest_day_id})
        )
    return _transition(
        state,
        day_plans=[
            source.model_copy(update={"items": source_items}),
            dest.model_copy(update={"items": dest_items}),
        ],
        entities=entities,
    )


def toggle_lock(state: TripState, entity_id: str, day_plan_id: str) -> Transition:
    """Flip the lock of an entity's placement in one day."""
    day_plan = state.day_plans.get(day_plan_id)
    if day_plan is None or not day_plan.contains(entity_id):
        return Transition.unchanged(state)

    items = tuple(
        item.model_copy(update={"locked": not item.locked})
        if item.references(entity_id)
        else item
        for item in day_plan.items
    )
    return _transition(state, day_plans=[day_plan.model_copy(update={"items": items})])


def clear_day(state: TripState, day_plan_id: str) -> Transition:
    """Remove every unlocked item from a day; locked items stay in their order."""
    day_plan = state.day_plans.get(day_plan_id)
    if day_plan is None:
        return Transition.unchanged(state)

    removed = [item for item in day_plan.items if not item.locked]
    if not removed:
        return Transition.unchanged(state)
    kept = renumber(sort_items(item for item in day_plan.items if item.locked))

    entities = []
    for item in removed:
        entity = state.get_entity(item.entity_id, item.entity_type)
        if entity is not None:
            entities.append(entity.with_day_ids(entity.scheduled_day_ids - {day_plan_id}))

    return _transition(
        state,
        day_plans=[day_plan.model_copy(update={"items": kept})],
        entities=entities,
    )


def update_day_plan(
    state: TripState, day_plan_id: str, changes: Mapping[str, Optional[str]]
) -> Transition:
    """Edit the free-text fields (theme, notes) of a day."""
    unknown = set(changes) - EDITABLE_DAY_PLAN_FIELDS
    if unknown:
        raise ProtectedFieldError(unknown)
    day_plan = state.day_plans.get(day_plan_id)
    if day_plan is None:
        return Transition.unchanged(state)
    edited = DayPlanState.model_validate({**day_plan.model_dump(), **changes})
    return _transition(state, day_plans=[edited])


def add_entity(state: TripState, entity: Entity) -> Transition:
    """Register a new place or transport in the bucket list."""
    if state.get_entity(entity.id) is not None:
        raise DuplicateEntityError(f"Entity {entity.id} already exists")
    entity = entity.unscheduled()
    return Transition(
        state=state.updated(entities=[entity]),
        saved_entity_ids=frozenset({entity.id}),
    )


def update_entity(
    state: TripState, entity_id: str, changes: Mapping[str, Any]
) -> Transition:
    """
    Apply a partial edit to a place or transport.

    Schedule fields and identity are refused so that an edit form can never
    unschedule an entity by sending a partial record.
    """
    protected = set(changes) & PROTECTED_ENTITY_FIELDS
    if protected:
        raise ProtectedFieldError(protected)
    entity = state.get_entity(entity_id)
    if entity is None:
        return Transition.unchanged(state)

    edited = type(entity).model_validate({**entity.model_dump(), **changes})
    if edited == entity:
        return Transition.unchanged(state)
    if isinstance(edited, PlaceState) and not edited.is_restaurant:
        for day_plan in state.day_plans.values():
            item = day_plan.find_item(entity_id)
            if item is not None and item.time_of_day in MEAL_SLOTS:
                raise MealSlotConflictError(
                    f"Place {entity_id} is scheduled for {item.time_of_day.value} "
                    f"on {day_plan.plan_date}; unschedule it before dropping the restaurant tag"
                )
    return Transition(
        state=state.updated(entities=[edited]),
        saved_entity_ids=frozenset({entity_id}),
    )


def remove_entity(state: TripState, entity_id: str) -> Transition:
    """Delete an entity and prune its placements from every day."""
    entity = state.get_entity(entity_id)
    if entity is None:
        return Transition.unchanged(state)

    changed_days = []
    for day_plan in state.day_plans.values():
        removed, items = remove_from_items(day_plan.items, entity_id)
        if removed is not None:
            changed_days.append(day_plan.model_copy(update={"items": items}))

    places = {k: v for k, v in state.places.items() if k != entity_id}
    transports = {k: v for k, v in state.transports.items() if k != entity_id}
    pruned = state.model_copy(update={"places": places, "transports": transports})
    return Transition(
        state=pruned.updated(day_plans=changed_days),
        day_plan_ids=frozenset(dp.id for dp in changed_days),
        entity_ids=frozenset({entity_id}),
    )
