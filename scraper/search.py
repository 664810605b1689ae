"""Integer search over monotonic predicates.

A monotonic predicate is true for a prefix of the positive integers and false
afterwards. The helpers below find the end of that prefix without knowing an
upper bound in advance: double a probe until it turns false, then binary
search the bracket.
"""
import logging
from typing import Callable, NamedTuple

logger = logging.getLogger(__name__)

Predicate = Callable[[int], bool]


class Bracket(NamedTuple):
    """Search interval plus the largest index known to satisfy the predicate."""
    left: int
    right: int
    last_valid: int


def expand_upper_bound(
    predicate: Predicate,
    left: int,
    right: int,
    last_valid: int = 0,
    max_right: int = 100_000
) -> Bracket:
    """
    Double ``right`` until the predicate is false there.

    Args:
        predicate: Monotonic predicate
        left: Lower end of the bracket
        right: First index to probe
        last_valid: Largest index already known to be true (0 if none)
        max_right: Ceiling on ``right``; doubling stops once it is passed

    Returns:
        Bracket whose ``right`` is false (or past the ceiling)
    """
    while predicate(right):
        last_valid = right
        left = right
        right *= 2
        if right > max_right:
            logger.warning(
                f"Upper bound search passed {max_right}, stopping at {right}"
            )
            break

    return Bracket(left, right, last_valid)


def last_true(predicate: Predicate, bracket: Bracket) -> int:
    """
    Binary search a bracket for the last index where the predicate holds.

    Args:
        predicate: Monotonic predicate
        bracket: Interval to search and the best index found so far

    Returns:
        Largest true index seen, or ``bracket.last_valid`` if none in range
    """
    left, right, last_valid = bracket

    while left <= right:
        mid = (left + right) // 2
        if predicate(mid):
            last_valid = mid
            left = mid + 1
        else:
            right = mid - 1

    return last_valid


def find_last_true(
    predicate: Predicate,
    left: int = 1,
    right: int = 10,
    last_valid: int = 0,
    max_right: int = 100_000
) -> int:
    """Unbounded search: expand the upper bound, then binary search."""
    bracket = expand_upper_bound(predicate, left, right, last_valid, max_right)
    return last_true(predicate, bracket)
