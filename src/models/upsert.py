from typing import Iterable, Optional, TypeVar

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

ModelT = TypeVar("ModelT", bound=SQLModel)


def _primary_key_columns(model_cls: type[SQLModel]) -> list[str]:
    return [column.name for column in inspect(model_cls).primary_key]


async def upsert(
    session: AsyncSession,
    model: ModelT,
    only: Optional[Iterable[str]] = None,
) -> ModelT:
    """
    Insert a row or update it in place when the primary key already exists.

    Args:
        session: The database session
        model: The row to write
        only: Restrict the columns overwritten on conflict (defaults to all)

    Returns:
        The model that was written
    """
    model_cls = type(model)
    pk_cols = _primary_key_columns(model_cls)
    values = model.model_dump()

    update_cols = set(only) if only is not None else set(values) - set(pk_cols)
    stmt = insert(model_cls).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=pk_cols,
        set_={col: stmt.excluded[col] for col in update_cols},
    )
    await session.execute(stmt)
    return model

