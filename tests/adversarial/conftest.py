"""
Shared fixtures for adversarial tests.

Race and timing simulations run against the in-memory repository, which
enforces the same uniqueness and version rules as the PostgreSQL adapter.
"""

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from src.domain.models import VerificationRequested


class RecordingPublisher:
    """Implements VerificationEventPublisher, safe to call from many threads."""

    def __init__(self) -> None:
        self.events: list[VerificationRequested] = []
        self._lock = threading.Lock()

    def publish(self, event: VerificationRequested) -> None:
        with self._lock:
            self.events.append(event)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def attack() -> Callable[[Callable[[], Any], int], list[Any]]:
    """
    Run the same callable from N threads released at once.

    Returns each outcome: the return value, or the exception raised.
    """

    def run(target: Callable[[], Any], attackers: int) -> list[Any]:
        barrier = threading.Barrier(attackers)

        def attempt() -> Any:
            barrier.wait()
            try:
                return target()
            except Exception as e:
                return e

        with ThreadPoolExecutor(max_workers=attackers) as executor:
            futures = [executor.submit(attempt) for _ in range(attackers)]
            return [f.result() for f in futures]

    return run
