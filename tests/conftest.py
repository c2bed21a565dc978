"""Pytest configuration and shared fixtures."""

from collections.abc import Callable

import logfire
import pytest

from src.core.db_client import InMemoryDatabase
from src.services.custody_store import KeyCustodyStore


class StepClock:
    """Deterministic clock: each call returns a timestamp one second later."""

    def __init__(self, start: int = 0, *, step: int = 1) -> None:
        self._tick = start
        self._step = step

    def __call__(self) -> str:
        value = self._tick
        self._tick += self._step
        minutes, seconds = divmod(value, 60)
        hours, minutes = divmod(minutes, 60)
        return f"2026-03-01T{hours:02d}:{minutes:02d}:{seconds:02d}+00:00"


@pytest.fixture(scope="session", autouse=True)
def configure_logfire_for_tests() -> None:
    """Keep spans local during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def clock() -> Callable[[], str]:
    """Monotonic fake clock shared by the database and ledger."""
    return StepClock()


@pytest.fixture
def store(clock) -> KeyCustodyStore:
    """Store loaded with the demo accounts, keys, task and history."""
    return KeyCustodyStore(seed=True, clock=clock)


@pytest.fixture
def empty_store(clock) -> KeyCustodyStore:
    """Store with no records at all."""
    return KeyCustodyStore(seed=False, clock=clock)


@pytest.fixture
def in_memory_db(clock) -> InMemoryDatabase:
    """Provides a fresh InMemoryDatabase for each test."""
    return InMemoryDatabase(clock=clock)
