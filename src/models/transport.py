"""Transport model: a train, bus or car leg between two locations."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel, Column, DateTime, Text

from .enums import ScheduleStatus, TransportType


class Transport(SQLModel, table=True):
    """A transport leg that can be placed into the itinerary like a place."""

    __tablename__: str = "transport"

    id: str = Field(primary_key=True, max_length=36)
    trip_id: str = Field(max_length=36, foreign_key="trip.id", index=True)
    transport_type: str = Field(default=TransportType.train.value, max_length=20)
    origin: str = Field(max_length=255)
    destination: str = Field(max_length=255)
    departure_time: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    duration_minutes: Optional[int] = Field(default=None)
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
