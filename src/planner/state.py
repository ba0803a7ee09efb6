"""In-memory state of a single trip's planner.

The Entity Store (places and transports) and the Day Plan Store live together
in an immutable `TripState`. Engine operations never mutate a state in place;
they build a new one and describe what changed in a `Transition`.
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, ClassVar, Dict, Iterable, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.enums import (
    CategoryTag,
    EntityType,
    LEGACY_CATEGORY_ALIASES,
    ScheduleStatus,
    TimeOfDay,
    TransportType,
)


def new_id() -> str:
    return uuid.uuid4().hex


class PlaceRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["place"] = "place"
    entity_id: str

    @property
    def entity_type(self) -> EntityType:
        return EntityType.place


class TransportRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["transport"] = "transport"
    entity_id: str

    @property
    def entity_type(self) -> EntityType:
        return EntityType.transport


PlacementRef = Annotated[Union[PlaceRef, TransportRef], Field(discriminator="kind")]


def make_ref(entity_type: EntityType, entity_id: str) -> Union[PlaceRef, TransportRef]:
    if entity_type == EntityType.transport:
        return TransportRef(entity_id=entity_id)
    return PlaceRef(entity_id=entity_id)


class DayPlanItem(BaseModel):
    """A single placement of a place or transport inside a day plan."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    ref: PlacementRef
    order: int = Field(default=0, ge=0)
    time_of_day: TimeOfDay
    locked: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None

    @property
    def entity_id(self) -> str:
        return self.ref.entity_id

    @property
    def entity_type(self) -> EntityType:
        return self.ref.entity_type

    def references(self, entity_id: str) -> bool:
        return self.ref.entity_id == entity_id


class DayPlanState(BaseModel):
    """One calendar day of the trip with its placements sorted by `order`."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    trip_id: str
    plan_date: date
    items: tuple[DayPlanItem, ...] = ()
    theme: Optional[str] = None
    notes: Optional[str] = None

    def find_item(self, entity_id: str) -> Optional[DayPlanItem]:
        for item in self.items:
            if item.references(entity_id):
                return item
        return None

    def contains(self, entity_id: str) -> bool:
        return self.find_item(entity_id) is not None


EntityT = TypeVar("EntityT", bound="SchedulableEntity")


class SchedulableEntity(BaseModel):
    """Common shape of everything that can be dropped into a day."""

    model_config = ConfigDict(frozen=True)

    entity_type: ClassVar[EntityType]

    id: str = Field(default_factory=new_id)
    trip_id: str
    schedule_status: ScheduleStatus = ScheduleStatus.unscheduled
    scheduled_day_ids: frozenset[str] = frozenset()
    notes: Optional[str] = None

    @property
    def is_scheduled(self) -> bool:
        return self.schedule_status == ScheduleStatus.scheduled

    def with_day_ids(self: EntityT, day_ids: Iterable[str]) -> EntityT:
        """Return a copy placed in exactly `day_ids`, with the status derived from it."""
        ids = frozenset(day_ids)
        status = ScheduleStatus.scheduled if ids else ScheduleStatus.unscheduled
        if ids == self.scheduled_day_ids and status == self.schedule_status:
            return self
        return self.model_copy(
            update={"scheduled_day_ids": ids, "schedule_status": status}
        )

    def unscheduled(self: EntityT) -> EntityT:
        return self.with_day_ids(())


class PlaceState(SchedulableEntity):
    entity_type: ClassVar[EntityType] = EntityType.place

    name: str = ""
    categories: frozenset[CategoryTag] = frozenset()
    address: Optional[str] = None

    @field_validator("categories", mode="before")
    @classmethod
    def normalize_categories(cls, value):
        if value is None:
            return frozenset()
        return frozenset(
            LEGACY_CATEGORY_ALIASES.get(tag, tag) if isinstance(tag, str) else tag
            for tag in value
        )

    @property
    def is_restaurant(self) -> bool:
        return CategoryTag.restaurant in self.categories


class TransportState(SchedulableEntity):
    entity_type: ClassVar[EntityType] = EntityType.transport

    transport_type: TransportType = TransportType.train
    origin: str = ""
    destination: str = ""
    departure_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None


Entity = Union[PlaceState, TransportState]


class TripDates(BaseModel):
    """The part of a trip the planner needs: its id and inclusive date window."""

    model_config = ConfigDict(frozen=True)

    id: str
    start_date: date
    end_date: date


class TripState(BaseModel):
    """Everything the planner knows about one trip."""

    model_config = ConfigDict(frozen=True)

    trip_id: str
    places: Dict[str, PlaceState] = Field(default_factory=dict)
    transports: Dict[str, TransportState] = Field(default_factory=dict)
    day_plans: Dict[str, DayPlanState] = Field(default_factory=dict)

    def get_entity(
        self, entity_id: str, entity_type: Optional[EntityType] = None
    ) -> Optional[Entity]:
        if entity_type in (None, EntityType.place) and entity_id in self.places:
            return self.places[entity_id]
        if entity_type in (None, EntityType.transport):
            return self.transports.get(entity_id)
        return None

    def entities(self) -> list[Entity]:
        return [*self.places.values(), *self.transports.values()]

    def ordered_day_plans(self) -> list[DayPlanState]:
        return sorted(self.day_plans.values(), key=lambda dp: dp.plan_date)

    def day_plans_for_trip(self, trip_id: str) -> list[DayPlanState]:
        return [dp for dp in self.ordered_day_plans() if dp.trip_id == trip_id]

    def unscheduled_pool(self) -> list[Entity]:
        """Entities not placed in any day (the bucket list)."""
        return [entity for entity in self.entities() if not entity.scheduled_day_ids]

    def updated(
        self,
        day_plans: Iterable[DayPlanState] = (),
        entities: Iterable[Entity] = (),
    ) -> "TripState":
        """Return a new state with the given records replaced or added."""
        new_day_plans = dict(self.day_plans)
        new_places = dict(self.places)
        new_transports = dict(self.transports)
        for day_plan in day_plans:
            new_day_plans[day_plan.id] = day_plan
        for entity in entities:
            if isinstance(entity, PlaceState):
                new_places[entity.id] = entity
            else:
                new_transports[entity.id] = entity
        return self.model_copy(
            update={
                "day_plans": new_day_plans,
                "places": new_places,
                "transports": new_transports,
            }
        )


@dataclass(frozen=True)
class Transition:
    """
    Result of a planner operation.

    `day_plan_ids` are day plans whose items or text changed, `entity_ids` are
    entities whose schedule fields changed, and `saved_entity_ids` are entities
    created or edited as a whole. Ids missing from `state` were deleted.
    """

    state: TripState
    day_plan_ids: frozenset[str] = frozenset()
    entity_ids: frozenset[str] = frozenset()
    saved_entity_ids: frozenset[str] = frozenset()

    @classmethod
    def unchanged(cls, state: TripState) -> "Transition":
        return cls(state=state)

    @property
    def changed(self) -> bool:
        return bool(self.day_plan_ids or self.entity_ids or self.saved_entity_ids)
