"""Unit tests for planner state and database row conversions."""

from datetime import date

import pytest

from models import DayPlan, Place, Transport
from models.enums import CategoryTag, ScheduleStatus, TimeOfDay, TransportType
from planner.state import DayPlanItem, DayPlanState, PlaceRef, PlaceState, TransportRef
from sync.mappers import (
    day_plan_to_row,
    item_from_json,
    item_to_json,
    place_to_row,
    row_to_day_plan,
    row_to_place,
    row_to_transport,
    schedule_fields,
)


class TestItemJson:
    """Test the stored shape of day plan items."""

    def test_place_item_to_json(self):
        item = DayPlanItem(
            id="i1", ref=PlaceRef(entity_id="p1"), order=2, time_of_day=TimeOfDay.dinner, locked=True
        )

        assert item_to_json(item) == {
            "id": "i1",
            "placeId": "p1",
            "order": 2,
            "timeOfDay": "dinner",
            "locked": True,
        }

    def test_transport_item_to_json(self):
        item = DayPlanItem(id="i2", ref=TransportRef(entity_id="t1"), time_of_day=TimeOfDay.morning)

        data = item_to_json(item)

        assert data["transportId"] == "t1"
        assert "placeId" not in data

    def test_missing_time_of_day_defaults_to_morning(self):
        item = item_from_json({"id": "i1", "placeId": "p1", "order": 0})

        assert item.time_of_day == TimeOfDay.morning
        assert item.locked is False

    def test_transport_reference(self):
        item = item_from_json({"id": "i1", "transportId": "t1", "order": 1, "timeOfDay": "night"})

        assert isinstance(item.ref, TransportRef)
        assert item.entity_id == "t1"

    def test_times_and_notes_survive_a_resave(self):
        stored = {
            "id": "i1",
            "placeId": "p1",
            "order": 0,
            "timeOfDay": "afternoon",
            "locked": False,
            "startTime": "14:00",
            "endTime": "16:30",
            "notes": "Skip-the-line tickets",
        }

        item = item_from_json(stored)

        assert item.start_time == "14:00"
        assert item.notes == "Skip-the-line tickets"
        assert item_to_json(item) == stored

    @pytest.mark.parametrize(
        "data",
        [
            {"id": "i1", "order": 0},
            {"id": "i1", "placeId": "p1", "transportId": "t1", "order": 0},
        ],
    )
    def test_exactly_one_reference_required(self, data: dict):
        with pytest.raises(ValueError):
            item_from_json(data)


class TestDayPlanRows:
    """Test day plan conversions."""

    def test_items_written_in_order(self):
        day_plan = DayPlanState(
            id="d1",
            trip_id="t",
            plan_date=date(2026, 1, 1),
            items=(
                DayPlanItem(id="b", ref=PlaceRef(entity_id="p2"), order=1, time_of_day=TimeOfDay.night),
                DayPlanItem(id="a", ref=PlaceRef(entity_id="p1"), order=0, time_of_day=TimeOfDay.morning),
            ),
            theme="Arrival",
        )

        row = day_plan_to_row(day_plan)

        assert [data["id"] for data in row.items] == ["a", "b"]
        assert row.theme == "Arrival"
        assert row_to_day_plan(row).find_item("p2").time_of_day == TimeOfDay.night

    def test_null_items_read_as_empty(self):
        row = DayPlan(id="d1", trip_id="t", plan_date=date(2026, 1, 1))
        row.items = None

        assert row_to_day_plan(row).items == ()


class TestEntityRows:
    """Test place and transport conversions."""

    def test_legacy_food_category(self):
        row = Place(id="p1", trip_id="t", name="Tasca", categories=["food", "nightlife"])

        place = row_to_place(row)

        assert place.categories == {CategoryTag.restaurant, CategoryTag.nightlife}
        assert place.is_restaurant

    def test_status_recomputed_from_day_ids(self):
        row = Place(
            id="p1",
            trip_id="t",
            name="Tasca",
            schedule_status="unscheduled",
            scheduled_day_ids=["d1"],
        )

        place = row_to_place(row)

        assert place.schedule_status == ScheduleStatus.scheduled
        assert place.scheduled_day_ids == {"d1"}

    def test_null_day_ids_read_as_empty(self):
        row = Transport(id="t1", trip_id="t", origin="Lisbon", destination="Porto")
        row.scheduled_day_ids = None

        transport = row_to_transport(row)

        assert transport.scheduled_day_ids == frozenset()
        assert transport.transport_type == TransportType.train

    def test_place_to_row_sorts_lists(self):
        place = PlaceState(
            id="p1",
            trip_id="t",
            name="Tasca",
            categories=["shopping", "restaurant"],
        ).with_day_ids({"d2", "d1"})

        row = place_to_row(place)

        assert row.categories == ["restaurant", "shopping"]
        assert row.scheduled_day_ids == ["d1", "d2"]
        assert row.schedule_status == "scheduled"

    def test_schedule_fields(self):
        place = PlaceState(id="p1", trip_id="t").with_day_ids({"d3", "d1"})

        assert schedule_fields(place) == {
            "schedule_status": "scheduled",
            "scheduled_day_ids": ["d1", "d3"],
        }
