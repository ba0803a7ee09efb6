"""Outbox of planner changes waiting to be written to the database."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from planner.state import DayPlanState, PlaceState, TransportState, Transition, TripState


class RecordType(str, Enum):
    day_plan = "day_plan"
    place = "place"
    transport = "transport"


class ChangeAction(str, Enum):
    save = "save"  # write the whole record
    schedule = "schedule"  # write schedule_status and scheduled_day_ids only
    delete = "delete"


Snapshot = Union[DayPlanState, PlaceState, TransportState]


@dataclass(frozen=True)
class ChangeEvent:
    """A record that changed, with its state at commit time."""

    record_type: RecordType
    action: ChangeAction
    record_id: str
    snapshot: Optional[Snapshot] = None


def events_for_transition(before: TripState, transition: Transition) -> list[ChangeEvent]:
    """Describe a committed transition as outbox events, day plans first."""
    after = transition.state
    events: list[ChangeEvent] = []

    for day_plan_id in sorted(transition.day_plan_ids):
        events.append(
            ChangeEvent(
                RecordType.day_plan,
                ChangeAction.save,
                day_plan_id,
                after.day_plans[day_plan_id],
            )
        )

    for entity_id in sorted(transition.saved_entity_ids | transition.entity_ids):
        entity = after.get_entity(entity_id)
        if entity is None:
            previous = before.get_entity(entity_id)
            record_type = (
                RecordType.transport
                if isinstance(previous, TransportState)
                else RecordType.place
            )
            events.append(ChangeEvent(record_type, ChangeAction.delete, entity_id))
            continue

        record_type = (
            RecordType.transport if isinstance(entity, TransportState) else RecordType.place
        )
        action = (
            ChangeAction.save
            if entity_id in transition.saved_entity_ids
            else ChangeAction.schedule
        )
        events.append(ChangeEvent(record_type, action, entity_id, entity))

    return events


class Outbox:
    """First-in first-out buffer between the planner and the sync worker."""

    def __init__(self, maxlen: Optional[int] = None):
        self._events: deque[ChangeEvent] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._events)

    def put(self, event: ChangeEvent) -> None:
        self._events.append(event)

    def extend(self, events: Iterable[ChangeEvent]) -> None:
        self._events.extend(events)

    def drain(self, limit: Optional[int] = None) -> list[ChangeEvent]:
        """Remove and return up to `limit` events in commit order."""
        count = len(self._events) if limit is None else min(limit, len(self._events))
        return [self._events.popleft() for _ in range(count)]
