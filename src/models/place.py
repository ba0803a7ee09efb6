"""Place model: a restaurant, sight or activity that can be scheduled."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel, Column, DateTime, Text

from .enums import ScheduleStatus


class Place(SQLModel, table=True):
    """
    A place the travellers want to visit.
    `schedule_status` and `scheduled_day_ids` mirror the day plans that
    reference the place and are only written by the planner.
    """

    __tablename__: str = "place"

    id: str = Field(primary_key=True, max_length=36)
    trip_id: str = Field(max_length=36, foreign_key="trip.id", index=True)
    name: str = Field(max_length=255)
    categories: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    address: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    schedule_status: str = Field(
        default=ScheduleStatus.unscheduled.value, max_length=20
    )
    scheduled_day_ids: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
