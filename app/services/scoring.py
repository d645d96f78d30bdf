"""
Evaluation Scoring

Turns a supervisor's per-category ratings into one overall rating.

Each category carries a rating (1-5) and a relative weight. The overall
rating is the weighted average of the ratings, rounded to one decimal:

    overall = round_half_up(sum(rating * weight) / sum(weight), 1)

Arithmetic runs on Decimal built from the values as written, so a weighted
average that is exactly x.x5 in decimal always rounds up (3.85 -> 3.9) no
matter how the float weights happen to be represented in binary.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

Number = Union[int, float, Decimal]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Number, places: int = 1) -> float:
    """
    Round to `places` decimals, ties away from zero.

    Python's round() uses banker's rounding (round(0.25, 1) == 0.2);
    this helper gives 0.3.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(_to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_overall_rating(categories: Iterable) -> float:
    """
    Compute the weighted overall rating of an evaluation.

    Args:
        categories: objects with `rating` and `weight` attributes
                    (EvaluationCategory models or anything shaped like them)

    Returns:
        Float rounded to one decimal. 0.0 when the weights sum to zero.
    """
    total_weight = Decimal(0)
    weighted_sum = Decimal(0)

    for category in categories:
        weight = _to_decimal(category.weight)
        total_weight += weight
        weighted_sum += _to_decimal(category.rating) * weight

    if total_weight == 0:
        return 0.0

    return round_half_up(weighted_sum / total_weight, 1)
