"""Fixtures for core service tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest


class FakeUnitOfWork:
    """Hands out the same mocked session for every transaction."""

    def __init__(self, session: AsyncMock) -> None:
        self.ledger_session = session
        self.opened = 0

    @asynccontextmanager
    async def session(self):
        self.opened += 1
        yield self.ledger_session


@pytest.fixture
def ledger_session() -> AsyncMock:
    session = AsyncMock()
    session.get_party.return_value = None
    session.save_party.side_effect = lambda kind, party: party
    session.insert_product.side_effect = lambda product: product
    session.save_product.side_effect = lambda product: product
    return session


@pytest.fixture
def unit_of_work(ledger_session: AsyncMock) -> FakeUnitOfWork:
    return FakeUnitOfWork(ledger_session)
