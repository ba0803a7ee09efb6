"""Day plan model: one calendar day of a trip and its ordered placements."""

from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field, SQLModel, Column, Text


class DayPlan(SQLModel, table=True):
    """
    One day of a trip itinerary.
    `items` stores the full ordered placement list as JSON objects of the form
    {"id", "placeId" | "transportId", "order", "timeOfDay", "locked"}.
    """

    __tablename__: str = "day_plan"

    id: str = Field(primary_key=True, max_length=36)
    trip_id: str = Field(max_length=36, foreign_key="trip.id", index=True)
    plan_date: date = Field(index=True)
    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    theme: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))

    __table_args__ = (
        UniqueConstraint("trip_id", "plan_date", name="uq_day_plan_trip_date"),
    )
