# ============================================================================
# FILE: myoozik/core/ratings.py
# ============================================================================
from typing import Iterable, Optional

MIN_RATING = 1
MAX_RATING = 5


def average_rating(values: Iterable[int]) -> Optional[float]:
    """Arithmetic mean of rating values, None when there are no ratings (never 0)"""
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def is_valid_rating(value) -> bool:
    # bool is an int subclass; True is not a rating
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING
