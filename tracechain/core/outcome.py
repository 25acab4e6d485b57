"""
Simulated request outcomes and latency.

Each tier draws exactly one outcome per request from a fixed distribution:
10% server error, 10% client error and 80% success. The mapping from a
uniform random value to an outcome is a pure function so it can be tested
without touching the random source.

Example:
    >>> from tracechain.core.outcome import classify, OutcomeKind
    >>> classify(0.05)
    <OutcomeKind.SERVER_ERROR: 500>
    >>> classify(0.5).status_code
    200
"""

from __future__ import annotations

import asyncio
import random
from enum import Enum
from typing import Optional, Protocol

SERVER_ERROR_THRESHOLD = 0.10
CLIENT_ERROR_THRESHOLD = 0.20


class RandomSource(Protocol):
    """The subset of :class:`random.Random` the simulation draws from."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...


class OutcomeKind(Enum):
    """Outcome class of a simulated request, valued by its HTTP status."""
    SUCCESS = 200
    CLIENT_ERROR = 400
    SERVER_ERROR = 500

    @property
    def status_code(self) -> int:
        return self.value

    @property
    def is_error(self) -> bool:
        return self is not OutcomeKind.SUCCESS


def classify(value: float) -> OutcomeKind:
    """Map a uniform draw in [0, 1) to an outcome.

    Args:
        value: Random value in [0, 1)

    Returns:
        SERVER_ERROR below 0.10, CLIENT_ERROR below 0.20, SUCCESS otherwise
    """
    if value < SERVER_ERROR_THRESHOLD:
        return OutcomeKind.SERVER_ERROR
    if value < CLIENT_ERROR_THRESHOLD:
        return OutcomeKind.CLIENT_ERROR
    return OutcomeKind.SUCCESS


def draw_outcome(rng: Optional[RandomSource] = None) -> OutcomeKind:
    """Draw one outcome from the fixed distribution."""
    return classify((rng or random).random())


async def simulate_latency(
    min_seconds: float,
    max_seconds: float,
    rng: Optional[RandomSource] = None,
) -> float:
    """Suspend the current task for a uniformly drawn delay.

    The wait yields to the event loop so other requests keep being served.
    No upper bound beyond ``max_seconds`` is enforced.

    Args:
        min_seconds: Lower bound of the delay window
        max_seconds: Upper bound of the delay window
        rng: Random source (module-level ``random`` when omitted)

    Returns:
        The delay that was slept, in seconds
    """
    delay = (rng or random).uniform(min_seconds, max_seconds)
    await asyncio.sleep(delay)
    return delay
