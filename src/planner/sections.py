"""Time-of-day sections of a day plan and the splice/renumber primitives.

A day plan keeps one global, dense `order` across all of its items. Sections
are only a view: the items of one `TimeOfDay`, in their global order.
"""

from typing import Iterable, Optional, Sequence

from models.enums import TIME_OF_DAY_ORDER, TimeOfDay
from .state import DayPlanItem

_SECTION_RANK = {time_of_day: rank for rank, time_of_day in enumerate(TIME_OF_DAY_ORDER)}


def sort_items(items: Iterable[DayPlanItem]) -> list[DayPlanItem]:
    return sorted(items, key=lambda item: item.order)


def section_items(
    items: Iterable[DayPlanItem], time_of_day: TimeOfDay
) -> list[DayPlanItem]:
    """Items of one section, in their relative global order."""
    return [item for item in sort_items(items) if item.time_of_day == time_of_day]


def group_by_section(items: Iterable[DayPlanItem]) -> dict[TimeOfDay, list[DayPlanItem]]:
    sections: dict[TimeOfDay, list[DayPlanItem]] = {tod: [] for tod in TIME_OF_DAY_ORDER}
    for item in sort_items(items):
        sections[item.time_of_day].append(item)
    return sections


def renumber(items: Sequence[DayPlanItem]) -> tuple[DayPlanItem, ...]:
    """Assign dense orders 0..n-1 following the sequence order."""
    return tuple(
        item if item.order == index else item.model_copy(update={"order": index})
        for index, item in enumerate(items)
    )


def _insert_position(
    ordered: Sequence[DayPlanItem], time_of_day: TimeOfDay, section_index: int
) -> int:
    positions = [i for i, item in enumerate(ordered) if item.time_of_day == time_of_day]
    index = min(max(section_index, 0), len(positions))

    if index < len(positions):
        return positions[index]
    if positions:
        return positions[-1] + 1

    # Empty section: go right after the last item of an earlier section
    rank = _SECTION_RANK[time_of_day]
    position = 0
    for i, item in enumerate(ordered):
        if _SECTION_RANK[item.time_of_day] < rank:
            position = i + 1
    return position


def insert_into_section(
    items: Iterable[DayPlanItem], new_item: DayPlanItem, section_index: int
) -> tuple[DayPlanItem, ...]:
    """
    Splice `new_item` into its section at `section_index` and renumber.

    Items of every other section keep their relative order. Out of range
    indices are clamped to the start or the end of the section.
    """
    ordered = sort_items(items)
    position = _insert_position(ordered, new_item.time_of_day, section_index)
    ordered.insert(position, new_item)
    return renumber(ordered)


def remove_entity(
    items: Iterable[DayPlanItem], entity_id: str
) -> tuple[Optional[DayPlanItem], tuple[DayPlanItem, ...]]:
    """Take the item referencing `entity_id` out and renumber the rest."""
    removed: Optional[DayPlanItem] = None
    remaining: list[DayPlanItem] = []
    for item in sort_items(items):
        if removed is None and item.references(entity_id):
            removed = item
        else:
            remaining.append(item)
    return removed, renumber(remaining)
