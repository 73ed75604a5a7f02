"""
Rounding helpers shared by extraction and matching.

Python's built-in round() uses banker's rounding; percentages here must round
halves up so 98.5 becomes 99, not 98.
"""
import math
from typing import List, Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def percentages_summing_to(weights: Sequence[float], total: int = 100) -> List[int]:
    """
    Convert weights to integer percentages that sum exactly to ``total``.

    Each share is first rounded half-up. When that leaves a residue, the
    largest-remainder method is used instead: every share is floored and the
    leftover units go to the largest fractional parts, earlier positions
    winning ties. Both agree whenever plain rounding already sums to total.

    Args:
        weights: Non-negative weights, at least one positive

    Returns:
        Integer percentages in the same order as ``weights``
    """
    weight_sum = float(sum(weights))
    if weight_sum <= 0:
        raise ValueError("weights must sum to a positive value")

    shares = [total * w / weight_sum for w in weights]
    rounded = [round_half_up(s) for s in shares]
    if sum(rounded) == total:
        return rounded

    floored = [int(math.floor(s)) for s in shares]
    leftover = total - sum(floored)
    by_remainder = sorted(
        range(len(shares)),
        key=lambda i: (-(shares[i] - floored[i]), i)
    )
    for i in by_remainder[:leftover]:
        floored[i] += 1
    return floored
