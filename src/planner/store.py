"""The trip planner store: the single mutation API over a trip's planner state."""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from config import get_settings
from models.enums import EntityType, TimeOfDay
from sync.outbox import Outbox, events_for_transition
from . import engine
from .days import initialize_day_plans
from .drop import (
    ClearDayCommand,
    Command,
    DropLocation,
    MoveBetweenDaysCommand,
    ReorderInDayCommand,
    ScheduleCommand,
    ToggleLockCommand,
    UnscheduleCommand,
    resolve_drop,
)
from .invariants import check_invariants
from .state import Entity, Transition, TripDates, TripState

logger = logging.getLogger(__name__)

Subscriber = Callable[[Transition], None]


class TripPlanner:
    """
    Owns the entity store and day plan store of one trip.

    Every change goes through one of the methods below. Each method computes
    the complete next state first and then commits it in a single step, feeds
    the outbox and notifies subscribers. Scheduling methods return whether
    anything changed; a rejected drop returns False and leaves the state as is.

    The planner is single-writer: callers driven by asynchronous input must
    serialize their calls.
    """

    def __init__(
        self,
        state: TripState,
        outbox: Optional[Outbox] = None,
        check_invariants: Optional[bool] = None,
    ):
        self._state = state
        self.outbox = outbox if outbox is not None else Outbox()
        self.check_invariants = (
            get_settings().check_invariants if check_invariants is None else check_invariants
        )
        self._subscribers: list[Subscriber] = []

    @classmethod
    def empty(cls, trip_id: str, **kwargs: Any) -> "TripPlanner":
        return cls(TripState(trip_id=trip_id), **kwargs)

    @property
    def state(self) -> TripState:
        return self._state

    @property
    def trip_id(self) -> str:
        return self._state.trip_id

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self, operation: str, transition: Transition) -> bool:
        if not transition.changed:
            logger.debug(f"{operation} rejected for trip {self.trip_id}; state unchanged")
            return False

        if self.check_invariants:
            check_invariants(transition.state)

        before = self._state
        self._state = transition.state
        self.outbox.extend(events_for_transition(before, transition))

        logger.info(
            f"{operation} committed for trip {self.trip_id}: "
            f"{len(transition.day_plan_ids)} day plans, "
            f"{len(transition.entity_ids | transition.saved_entity_ids)} entities changed"
        )

        for callback in list(self._subscribers):
            try:
                callback(transition)
            except Exception as e:
                logger.error(f"Planner subscriber {callback!r} failed: {e}")
        return True

    # --- Day plans ---

    def initialize_day_plans(self, trip: TripDates) -> bool:
        return self._commit("initialize_day_plans", initialize_day_plans(self._state, trip))

    def update_day_plan(self, day_plan_id: str, **changes: Optional[str]) -> bool:
        return self._commit(
            "update_day_plan", engine.update_day_plan(self._state, day_plan_id, changes)
        )

    # --- Scheduling ---

    def schedule(
        self,
        entity_id: str,
        entity_type: Union[EntityType, str],
        day_plan_id: str,
        section_index: int,
        time_of_day: Union[TimeOfDay, str] = TimeOfDay.morning,
    ) -> bool:
        return self._commit(
            "schedule",
            engine.schedule(
                self._state, entity_id, entity_type, day_plan_id, section_index, time_of_day
            ),
        )

    def unschedule(
        self,
        entity_id: str,
        entity_type: Union[EntityType, str],
        day_plan_id: Optional[str] = None,
    ) -> bool:
        return self._commit(
            "unschedule", engine.unschedule(self._state, entity_id, entity_type, day_plan_id)
        )

    def reorder_in_day(
        self,
        day_plan_id: str,
        entity_id: str,
        dest_section_index: int,
        time_of_day: Union[TimeOfDay, str] = TimeOfDay.morning,
    ) -> bool:
        return self._commit(
            "reorder_in_day",
            engine.reorder_in_day(
                self._state, day_plan_id, entity_id, dest_section_index, time_of_day
            ),
        )

    def move_between_days(
        self,
        entity_id: str,
        source_day_id: str,
        dest_day_id: str,
        dest_section_index: int,
        time_of_day: Union[TimeOfDay, str] = TimeOfDay.morning,
    ) -> bool:
        return self._commit(
            "move_between_days",
            engine.move_between_days(
                self._state,
                entity_id,
                source_day_id,
                dest_day_id,
                dest_section_index,
                time_of_day,
            ),
        )

    def toggle_lock(self, entity_id: str, day_plan_id: str) -> bool:
        return self._commit(
            "toggle_lock", engine.toggle_lock(self._state, entity_id, day_plan_id)
        )

    def clear_day(self, day_plan_id: str) -> bool:
        return self._commit("clear_day", engine.clear_day(self._state, day_plan_id))

    def dispatch(self, command: Command) -> bool:
        """Apply a planner command."""
        match command:
            case ScheduleCommand():
                return self.schedule(
                    command.entity_id,
                    command.entity_type,
                    command.day_plan_id,
                    command.section_index,
                    command.time_of_day,
                )
            case UnscheduleCommand():
                return self.unschedule(
                    command.entity_id, command.entity_type, command.day_plan_id
                )
            case ReorderInDayCommand():
                return self.reorder_in_day(
                    command.day_plan_id,
                    command.entity_id,
                    command.dest_section_index,
                    command.time_of_day,
                )
            case MoveBetweenDaysCommand():
                return self.move_between_days(
                    command.entity_id,
                    command.source_day_id,
                    command.dest_day_id,
                    command.dest_section_index,
                    command.time_of_day,
                )
            case ToggleLockCommand():
                return self.toggle_lock(command.entity_id, command.day_plan_id)
            case ClearDayCommand():
                return self.clear_day(command.day_plan_id)
        raise TypeError(f"Unknown planner command: {command!r}")

    def handle_drop(
        self,
        draggable_id: str,
        source: DropLocation,
        destination: Optional[DropLocation],
    ) -> bool:
        """Apply a finished drag-and-drop gesture."""
        command = resolve_drop(draggable_id, source, destination)
        if command is None:
            return False
        return self.dispatch(command)

    # --- Places and transports ---

    def add_entity(self, entity: Entity) -> Entity:
        transition = engine.add_entity(self._state, entity)
        self._commit("add_entity", transition)
        return entity.unscheduled()

    def update_entity(self, entity_id: str, changes: Mapping[str, Any]) -> bool:
        return self._commit(
            "update_entity", engine.update_entity(self._state, entity_id, changes)
        )

    def delete_entity(self, entity_id: str) -> bool:
        return self._commit("delete_entity", engine.remove_entity(self._state, entity_id))
