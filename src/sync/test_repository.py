"""Unit tests for loading and deleting trips."""

from datetime import date

import pytest

from models import DayPlan, Place, Transport, Trip
from models.enums import ScheduleStatus
from planner.invariants import find_violations
from planner.store import TripPlanner
from sync.repository import delete_trip, get_trip_dates, load_trip_state
from test_utils.mock_session import AsyncSessionMock


def make_day(day_plan_id: str, plan_date: date, items: list[dict]) -> DayPlan:
    return DayPlan(id=day_plan_id, trip_id="trip-1", plan_date=plan_date, items=items)


class TestLoadTripState:
    """Test reading a trip and repairing stored inconsistencies."""

    @pytest.mark.asyncio
    async def test_loads_consistent_trip(self, mock_session: AsyncSessionMock):
        mock_session.set_exec_results(
            [
                make_day(
                    "d1",
                    date(2026, 1, 1),
                    [{"id": "i1", "placeId": "p1", "order": 0, "timeOfDay": "morning", "locked": False}],
                ),
                make_day("d2", date(2026, 1, 2), []),
            ],
            [
                Place(
                    id="p1",
                    trip_id="trip-1",
                    name="Sintra",
                    schedule_status="scheduled",
                    scheduled_day_ids=["d1"],
                )
            ],
            [Transport(id="t1", trip_id="trip-1", origin="Lisbon", destination="Sintra")],
        )

        state = await load_trip_state(mock_session, "trip-1")

        assert [dp.id for dp in state.ordered_day_plans()] == ["d1", "d2"]
        assert state.places["p1"].scheduled_day_ids == {"d1"}
        assert state.transports["t1"].schedule_status == ScheduleStatus.unscheduled
        assert find_violations(state) == []
        assert mock_session.exec.await_count == 3

    @pytest.mark.asyncio
    async def test_repairs_orders_and_orphans(self, mock_session: AsyncSessionMock):
        """Gaps in orders are closed and items of deleted entities are dropped."""
        mock_session.set_exec_results(
            [
                make_day(
                    "d1",
                    date(2026, 1, 1),
                    [
                        {"id": "i3", "placeId": "p2", "order": 7, "timeOfDay": "night"},
                        {"id": "i1", "placeId": "p1", "order": 2},
                        {"id": "i2", "placeId": "gone", "order": 4},
                        {"id": "i4", "placeId": "p1", "order": 9},
                    ],
                ),
            ],
            [
                Place(id="p1", trip_id="trip-1", name="A", scheduled_day_ids=["d1"]),
                Place(id="p2", trip_id="trip-1", name="B", scheduled_day_ids=["d1"]),
            ],
            [],
        )

        state = await load_trip_state(mock_session, "trip-1")

        items = state.day_plans["d1"].items
        assert [(item.entity_id, item.order) for item in items] == [("p1", 0), ("p2", 1)]
        assert find_violations(state) == []

    @pytest.mark.asyncio
    async def test_rebuilds_schedule_fields_from_day_plans(self, mock_session: AsyncSessionMock):
        """A lost entity write is recovered from the day plans."""
        mock_session.set_exec_results(
            [make_day("d1", date(2026, 1, 1), [{"id": "i1", "placeId": "p1", "order": 0}])],
            [
                Place(id="p1", trip_id="trip-1", name="A", scheduled_day_ids=[]),
                Place(id="p2", trip_id="trip-1", name="B", scheduled_day_ids=["d1", "old-day"]),
            ],
            [],
        )

        state = await load_trip_state(mock_session, "trip-1")

        assert state.places["p1"].scheduled_day_ids == {"d1"}
        assert state.places["p1"].schedule_status == ScheduleStatus.scheduled
        assert state.places["p2"].scheduled_day_ids == frozenset()
        assert state.places["p2"].schedule_status == ScheduleStatus.unscheduled
        assert find_violations(state) == []

    @pytest.mark.asyncio
    async def test_drops_non_restaurant_from_meal_slot(self, mock_session: AsyncSessionMock):
        """A place that lost its restaurant tag while at lunch is unscheduled on load."""
        mock_session.set_exec_results(
            [make_day("d1", date(2026, 1, 1), [{"id": "i1", "placeId": "p1", "order": 0, "timeOfDay": "lunch"}])],
            [
                Place(id="p1", trip_id="trip-1", name="Old tavern", categories=["sightseeing"], scheduled_day_ids=["d1"]),
                Place(id="p2", trip_id="trip-1", name="Castle", categories=["culture"]),
            ],
            [],
        )

        state = await load_trip_state(mock_session, "trip-1")

        assert state.day_plans["d1"].items == ()
        assert state.places["p1"].scheduled_day_ids == frozenset()
        assert find_violations(state) == []
        planner = TripPlanner(state, check_invariants=True)
        assert planner.schedule("p2", "place", "d1", 0, "morning") is True

    @pytest.mark.asyncio
    async def test_keeps_first_restaurant_of_crowded_meal_slot(self, mock_session: AsyncSessionMock):
        mock_session.set_exec_results(
            [
                make_day(
                    "d1",
                    date(2026, 1, 1),
                    [
                        {"id": "i2", "placeId": "r2", "order": 1, "timeOfDay": "dinner"},
                        {"id": "i1", "placeId": "r1", "order": 0, "timeOfDay": "dinner"},
                    ],
                )
            ],
            [
                Place(id="r1", trip_id="trip-1", name="A", categories=["restaurant"], scheduled_day_ids=["d1"]),
                Place(id="r2", trip_id="trip-1", name="B", categories=["restaurant"], scheduled_day_ids=["d1"]),
            ],
            [],
        )

        state = await load_trip_state(mock_session, "trip-1")

        assert [item.entity_id for item in state.day_plans["d1"].items] == ["r1"]
        assert state.places["r2"].scheduled_day_ids == frozenset()
        assert find_violations(state) == []

    @pytest.mark.asyncio
    async def test_drops_item_with_wrong_reference_kind(self, mock_session: AsyncSessionMock):
        """A placeId pointing at a transport is not a valid placement."""
        mock_session.set_exec_results(
            [make_day("d1", date(2026, 1, 1), [{"id": "i1", "placeId": "t1", "order": 0}])],
            [],
            [Transport(id="t1", trip_id="trip-1", origin="Lisbon", destination="Porto", scheduled_day_ids=["d1"])],
        )

        state = await load_trip_state(mock_session, "trip-1")

        assert state.day_plans["d1"].items == ()
        assert state.transports["t1"].schedule_status == ScheduleStatus.unscheduled
        assert find_violations(state) == []


class TestTripRows:
    """Test reading trip dates and deleting trips."""

    @pytest.mark.asyncio
    async def test_get_trip_dates(self, mock_session: AsyncSessionMock):
        mock_session.get.return_value = Trip(
            id="trip-1", name="Portugal", start_date=date(2026, 1, 1), end_date=date(2026, 1, 4)
        )

        trip = await get_trip_dates(mock_session, "trip-1")

        assert trip.id == "trip-1"
        assert trip.end_date == date(2026, 1, 4)

    @pytest.mark.asyncio
    async def test_get_missing_trip(self, mock_session: AsyncSessionMock):
        assert await get_trip_dates(mock_session, "missing") is None

    @pytest.mark.asyncio
    async def test_delete_trip_removes_children_then_trip(self, mock_session: AsyncSessionMock):
        await delete_trip(mock_session, "trip-1")

        tables = [
            call.args[0].table.name for call in mock_session.execute.await_args_list
        ]
        assert tables == ["day_plan", "place", "transport", "trip"]
        mock_session.commit.assert_awaited_once()
