"""Injectable random sources for the forecast generator."""

from __future__ import annotations

import random
from typing import Callable, Protocol

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_api/random_source")


class RandomSource(Protocol):
    """Anything that can draw integers and unit floats (random.Random fits)."""

    def randrange(self, start: int, stop: int) -> int:
        """Return an integer in [start, stop)."""
        ...

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""
        ...


RandomSourceFactory = Callable[[], RandomSource]


def build_random_source(seed: int | None = None) -> RandomSource:
    """Return an entropy-seeded source, or a fixed-seed one when `seed` is set."""
    if seed is None:
        return random.Random()
    return random.Random(seed)


def random_source_factory(seed: int | None = None) -> RandomSourceFactory:
    """
    Return a callable that builds a fresh, independent source per call.

    With a fixed seed every call yields an identically seeded source, so each
    forecast generated through it repeats the same values.
    """
    if seed is not None:
        logger.info("Using fixed-seed random source", extra={"seed": seed})

    def _factory() -> RandomSource:
        return build_random_source(seed)

    return _factory
