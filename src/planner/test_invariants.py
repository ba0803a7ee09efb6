"""Unit tests for planner consistency checks and section helpers."""

from datetime import date

import pytest

from models.enums import ScheduleStatus, TimeOfDay
from planner.errors import InvariantViolation
from planner.invariants import check_invariants, find_violations
from planner.sections import group_by_section, insert_into_section, remove_entity
from planner.state import (
    DayPlanItem,
    DayPlanState,
    PlaceRef,
    PlaceState,
    TransportRef,
    TransportState,
    TripState,
)


def item(entity_id: str, order: int, time_of_day: str = "morning", transport: bool = False) -> DayPlanItem:
    ref = TransportRef(entity_id=entity_id) if transport else PlaceRef(entity_id=entity_id)
    return DayPlanItem(id=f"item-{entity_id}", ref=ref, order=order, time_of_day=TimeOfDay(time_of_day))


def trip_with(items: list[DayPlanItem], **entities) -> TripState:
    day = DayPlanState(id="d1", trip_id="t", plan_date=date(2026, 1, 1), items=tuple(items))
    places = {k: v for k, v in entities.items() if isinstance(v, PlaceState)}
    transports = {k: v for k, v in entities.items() if isinstance(v, TransportState)}
    return TripState(trip_id="t", places=places, transports=transports, day_plans={"d1": day})


def placed(entity_cls, entity_id: str, **kwargs):
    return entity_cls(id=entity_id, trip_id="t", **kwargs).with_day_ids({"d1"})


class TestFindViolations:
    """Test detection of inconsistent planner states."""

    def test_consistent_state(self):
        state = trip_with(
            [item("p1", 0), item("r1", 1, "lunch")],
            p1=placed(PlaceState, "p1"),
            r1=placed(PlaceState, "r1", categories=["restaurant"]),
        )
        assert find_violations(state) == []
        check_invariants(state)

    def test_gap_in_orders(self):
        state = trip_with([item("p1", 0), item("p2", 2)], p1=placed(PlaceState, "p1"), p2=placed(PlaceState, "p2"))
        assert any("not dense" in problem for problem in find_violations(state))

    def test_duplicate_placement(self):
        state = trip_with([item("p1", 0), item("p1", 1)], p1=placed(PlaceState, "p1"))
        assert any("more than once" in problem for problem in find_violations(state))

    def test_unknown_reference(self):
        state = trip_with([item("ghost", 0)])
        assert any("unknown" in problem for problem in find_violations(state))

    def test_transport_in_meal_slot(self):
        state = trip_with([item("t1", 0, "dinner", transport=True)], t1=placed(TransportState, "t1"))
        assert any("non-restaurant" in problem for problem in find_violations(state))

    def test_two_restaurants_at_lunch(self):
        state = trip_with(
            [item("r1", 0, "lunch"), item("r2", 1, "lunch")],
            r1=placed(PlaceState, "r1", categories=["restaurant"]),
            r2=placed(PlaceState, "r2", categories=["restaurant"]),
        )
        assert any("holds 2 items" in problem for problem in find_violations(state))

    def test_scheduled_ids_out_of_sync(self):
        state = trip_with([item("p1", 0)], p1=PlaceState(id="p1", trip_id="t"))
        problems = find_violations(state)
        assert any("scheduled_day_ids" in problem for problem in problems)

    def test_status_out_of_sync(self):
        place = PlaceState(
            id="p1",
            trip_id="t",
            schedule_status=ScheduleStatus.scheduled,
        )
        state = trip_with([], p1=place)
        assert any("status" in problem for problem in find_violations(state))

    def test_check_invariants_raises_assertion_error(self):
        state = trip_with([item("ghost", 0)])
        with pytest.raises(AssertionError) as exc_info:
            check_invariants(state)
        assert isinstance(exc_info.value, InvariantViolation)
        assert exc_info.value.problems


class TestSections:
    """Test the section splice helpers."""

    def test_group_by_section_has_every_section(self):
        sections = group_by_section([item("p1", 1, "night"), item("p2", 0)])
        assert list(sections) == list(TimeOfDay)
        assert [i.entity_id for i in sections[TimeOfDay.morning]] == ["p2"]
        assert [i.entity_id for i in sections[TimeOfDay.night]] == ["p1"]

    def test_insert_into_empty_day(self):
        items = insert_into_section((), item("p1", 0, "dinner"), 3)
        assert [(i.entity_id, i.order) for i in items] == [("p1", 0)]

    def test_insert_into_empty_section_before_later_sections(self):
        items = insert_into_section(
            [item("p1", 0, "morning"), item("p2", 1, "night")],
            item("p3", 0, "afternoon"),
            0,
        )
        assert [(i.entity_id, i.order) for i in items] == [("p1", 0), ("p3", 1), ("p2", 2)]

    def test_insert_into_empty_first_section(self):
        items = insert_into_section([item("p2", 0, "night")], item("p1", 0, "morning"), 0)
        assert [i.entity_id for i in items] == ["p1", "p2"]

    def test_remove_entity_renumbers(self):
        removed, items = remove_entity([item("p1", 0), item("p2", 1), item("p3", 2)], "p2")
        assert removed.entity_id == "p2"
        assert [(i.entity_id, i.order) for i in items] == [("p1", 0), ("p3", 1)]

    def test_remove_missing_entity(self):
        removed, items = remove_entity([item("p1", 0)], "p9")
        assert removed is None
        assert len(items) == 1
