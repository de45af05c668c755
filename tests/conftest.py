from __future__ import annotations

from datetime import datetime, timezone

import numpy as np
import pytest

from attendance.memory_store import InMemoryEventStore
from configs.settings import Settings
from core.system import TimeclockSystem
from embeddings.manager import InMemoryGallery

# Wednesday; the Sunday-first week runs 2026-10-18 .. 2026-10-24.
NOW = datetime(2026, 10, 21, 17, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, hour: int, minute: int = 0) -> None:
        self.now = self.now.replace(hour=hour, minute=minute)


def at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, day, hour, minute, tzinfo=timezone.utc)


def make_vector(seed: int) -> list:
    rng = np.random.default_rng(seed)
    return (rng.normal(size=128) * 0.1).tolist()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def gallery() -> InMemoryGallery:
    return InMemoryGallery()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def system(settings, store, gallery, clock) -> TimeclockSystem:
    return TimeclockSystem(settings=settings, store=store, gallery=gallery, clock=clock)


@pytest.fixture
def worker(gallery):
    return gallery.enroll("w1", template=make_vector(1), name="Ana")
