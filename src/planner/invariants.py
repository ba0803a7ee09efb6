"""Consistency checks between the entity store and the day plan store."""

from models.enums import MEAL_SLOTS, ScheduleStatus
from .errors import InvariantViolation
from .sections import section_items
from .state import PlaceState, TripState


def find_violations(state: TripState) -> list[str]:
    """Describe every broken planner invariant in `state` (empty when consistent)."""
    problems: list[str] = []
    placements: dict[str, set[str]] = {}

    for day_plan in state.day_plans.values():
        orders = sorted(item.order for item in day_plan.items)
        if orders != list(range(len(orders))):
            problems.append(f"Day {day_plan.id}: orders {orders} are not dense")

        seen: set[str] = set()
        for item in day_plan.items:
            if item.entity_id in seen:
                problems.append(
                    f"Day {day_plan.id}: entity {item.entity_id} placed more than once"
                )
            seen.add(item.entity_id)
            placements.setdefault(item.entity_id, set()).add(day_plan.id)

            if state.get_entity(item.entity_id, item.entity_type) is None:
                problems.append(
                    f"Day {day_plan.id}: item {item.id} references unknown "
                    f"{item.entity_type.value} {item.entity_id}"
                )

        for time_of_day in MEAL_SLOTS:
            meal_items = section_items(day_plan.items, time_of_day)
            if len(meal_items) > 1:
                problems.append(
                    f"Day {day_plan.id}: {time_of_day.value} holds {len(meal_items)} items"
                )
            for item in meal_items:
                place = state.places.get(item.entity_id)
                if not isinstance(place, PlaceState) or not place.is_restaurant:
                    problems.append(
                        f"Day {day_plan.id}: {time_of_day.value} holds non-restaurant "
                        f"{item.entity_type.value} {item.entity_id}"
                    )

    for entity in state.entities():
        expected = placements.get(entity.id, set())
        if set(entity.scheduled_day_ids) != expected:
            problems.append(
                f"Entity {entity.id}: scheduled_day_ids {sorted(entity.scheduled_day_ids)} "
                f"!= placements {sorted(expected)}"
            )
        should_be = ScheduleStatus.scheduled if entity.scheduled_day_ids else ScheduleStatus.unscheduled
        if entity.schedule_status != should_be:
            problems.append(
                f"Entity {entity.id}: status {entity.schedule_status.value} "
                f"but {len(entity.scheduled_day_ids)} scheduled days"
            )

    return problems


def check_invariants(state: TripState) -> None:
    """Raise `InvariantViolation` when `state` is inconsistent."""
    problems = find_violations(state)
    if problems:
        raise InvariantViolation(problems)
