"""Simulated portfolio valuation step (no external calls)."""

import random

from .models import ValuationSample

# Uniform draw shifted by this amount gives a slight negative drift.
DRIFT_OFFSET = 0.4
# Divisor bounding the daily move to [-2%, +3%).
SPREAD_DIVISOR = 20


def next_valuation_sample(
    last: ValuationSample,
    rng: random.Random | None = None,
) -> ValuationSample:
    """Compute the sample following ``last``.

    new_value = last_value * (1 + (U(0, 1) - 0.4) / 20), rounded to a whole unit.
    """
    draw = (rng or random).random()
    factor = 1 + (draw - DRIFT_OFFSET) / SPREAD_DIVISOR
    value = max(0, round(last.value * factor))
    return ValuationSample(day=last.day + 1, value=value)
