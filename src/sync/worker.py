"""Background worker that writes planner changes from the outbox to the database."""

import asyncio
import logging
from typing import Callable, Optional

from sqlalchemy import delete, update
from sqlmodel.ext.asyncio.session import AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_random_exponential,
)

from config import Settings, get_settings
from db import create_engine, create_session_factory
from models import DayPlan, Place, Transport
from models.upsert import upsert
from planner.state import DayPlanState, PlaceState, TransportState
from .mappers import day_plan_to_row, place_to_row, schedule_fields, transport_to_row
from .outbox import ChangeAction, ChangeEvent, Outbox, RecordType

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]

_TABLES = {
    RecordType.day_plan: DayPlan,
    RecordType.place: Place,
    RecordType.transport: Transport,
}

# Never overwrite the original creation time when a row is saved again
_IMMUTABLE_COLUMNS = {"id", "created_at"}


class SyncWorker:
    """
    Drains the planner outbox into the database.

    Writes are best effort: each event is retried with backoff, and an event
    that still fails is logged and dropped. The in-memory planner state is
    never rolled back, so the user can keep planning while sync is failing.
    """

    def __init__(
        self,
        outbox: Outbox,
        session_factory: SessionFactory,
        settings: Optional[Settings] = None,
    ):
        self.outbox = outbox
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        self._stopped = asyncio.Event()

    @classmethod
    def from_settings(cls, outbox: Outbox, settings: Optional[Settings] = None) -> "SyncWorker":
        settings = settings or get_settings()
        engine = create_engine(settings)
        return cls(outbox, create_session_factory(engine), settings)

    async def flush(self) -> int:
        """
        Write up to one batch of pending events.

        Returns:
            Number of events written successfully
        """
        events = self.outbox.drain(self.settings.sync_batch_size)
        if not events:
            return 0

        written = 0
        for event in events:
            try:
                await self._write_with_retry(event)
                written += 1
            except Exception as e:
                logger.error(
                    f"Dropping {event.action.value} of {event.record_type.value} "
                    f"{event.record_id} after {self.settings.sync_max_attempts} attempts: {e}"
                )

        logger.info(f"Synced {written}/{len(events)} planner changes")
        return written

    async def run(self) -> None:
        """Flush on an interval until `stop()` is called, then flush what is left."""
        logger.info(
            f"Sync worker started (interval={self.settings.sync_interval_seconds}s)"
        )
        while not self._stopped.is_set():
            await self.flush()
            try:
                await asyncio.wait_for(
                    self._stopped.wait(), timeout=self.settings.sync_interval_seconds
                )
            except asyncio.TimeoutError:
                pass

        while len(self.outbox):
            await self.flush()
        logger.info("Sync worker stopped")

    def stop(self) -> None:
        self._stopped.set()

    async def _write_with_retry(self, event: ChangeEvent) -> None:
        async for attempt in AsyncRetrying(
            wait=wait_random_exponential(min=0.5, max=30),
            stop=stop_after_attempt(self.settings.sync_max_attempts),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            reraise=True,
        ):
            with attempt:
                async with self.session_factory() as session:
                    await self._write(session, event)
                    await session.commit()

    async def _write(self, session: AsyncSession, event: ChangeEvent) -> None:
        table = _TABLES[event.record_type]

        match event.action:
            case ChangeAction.delete:
                await session.execute(delete(table).where(table.id == event.record_id))
            case ChangeAction.schedule:
                if not isinstance(event.snapshot, (PlaceState, TransportState)):
                    raise ValueError(
                        f"Cannot schedule {event.record_type.value} {event.record_id} without a snapshot"
                    )
                await session.execute(
                    update(table)
                    .where(table.id == event.record_id)
                    .values(**schedule_fields(event.snapshot))
                )
            case ChangeAction.save:
                row = self._to_row(event)
                columns = set(row.model_dump()) - _IMMUTABLE_COLUMNS
                await upsert(session, row, only=columns)

    @staticmethod
    def _to_row(event: ChangeEvent) -> DayPlan | Place | Transport:
        snapshot = event.snapshot
        if isinstance(snapshot, DayPlanState):
            return day_plan_to_row(snapshot)
        if isinstance(snapshot, PlaceState):
            return place_to_row(snapshot)
        if isinstance(snapshot, TransportState):
            return transport_to_row(snapshot)
        raise ValueError(f"Cannot save {event.record_type.value} {event.record_id} without a snapshot")
