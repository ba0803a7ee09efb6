from typing import Any, Iterable
from unittest.mock import AsyncMock, Mock

from sqlmodel.ext.asyncio.session import AsyncSession


class AsyncSessionMock(Mock):
    """
    Stand-in for `AsyncSession`.

    `exec`, `execute`, `get`, `commit` and `rollback` are awaitable. The mock
    also works as an async context manager yielding itself, so a factory
    returning it can replace a real session factory.
    """

    def __init__(self, **kwargs: Any):
        super().__init__(spec=AsyncSession, **kwargs)
        self.exec = AsyncMock()
        self.execute = AsyncMock()
        self.get = AsyncMock(return_value=None)
        self.commit = AsyncMock()
        self.rollback = AsyncMock()
        self.add = Mock()

    async def __aenter__(self) -> "AsyncSessionMock":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None

    def set_exec_results(self, *results: Iterable[Any]) -> None:
        """Queue the rows returned by consecutive `exec(select(...))` calls."""
        responses = []
        for rows in results:
            response = Mock()
            response.all.return_value = list(rows)
            responses.append(response)
        self.exec.side_effect = responses
