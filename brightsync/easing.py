"""Ease-out brightness ramps."""

from collections.abc import Iterator

DEFAULT_STEPS = 15


def ease_out_quad(progress: float) -> float:
    """Ease out quad: starts fast, slows down at the end."""
    return 1 - (1 - progress) ** 2


def transition_values(
    start: float, end: float, steps: int = DEFAULT_STEPS
) -> Iterator[float]:
    """Yield the intermediate brightness values from start to end.

    Produces exactly `steps` values, the last one equal to `end`, and nothing
    at all when the endpoints are equal.
    """
    if start == end:
        return

    for step in range(1, steps + 1):
        yield start + (end - start) * ease_out_quad(step / steps)
