"""Trip model: the date window that owns places, transports and day plans."""

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, Column, DateTime


class Trip(SQLModel, table=True):
    """A trip spanning an inclusive range of calendar days."""

    __tablename__: str = "trip"

    id: str = Field(primary_key=True, max_length=36)
    name: str = Field(max_length=255)
    destination: Optional[str] = Field(default=None, max_length=255)
    start_date: date
    end_date: date
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
