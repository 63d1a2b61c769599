"""Helpers shared by the engine modules."""
from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar('T')


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def weighted_choice(rng, options: Sequence[T], weights: Sequence[float]) -> T:
    """
    Pick one option with probability proportional to its weight.

    Uses a single rng.random() draw so runs stay reproducible for a seed.
    Negative weights count as 0; if every weight is 0 the draw is uniform.

    Raises:
        ValueError: no options, or options/weights of different length
    """
    if not options or len(options) != len(weights):
        raise ValueError("weighted_choice needs matching, non-empty options and weights")
    clean = [max(0.0, float(w)) for w in weights]
    total = sum(clean)
    roll = rng.random()
    if total <= 0:
        return options[min(len(options) - 1, int(roll * len(options)))]
    target = roll * total
    cumulative = 0.0
    for option, w in zip(options, clean):
        cumulative += w
        if target < cumulative:
            return option
    # float rounding at roll ~ 1.0
    for option, w in zip(reversed(options), reversed(clean)):
        if w > 0:
            return option
    return options[-1]
