"""
Stance Interval Module

Circular time intervals between alternating foot contacts.

One gait cycle is cut at every foot contact. Each piece runs from a contact of
one foot to the next contact of the other foot, so consecutive intervals
alternate between left-then-right and right-then-left order. The final
interval runs from the last contact back around the loop point to the first
contact, which makes its left bound numerically larger than its right bound
(a "wrapped" interval).

Example (duration 8.0, left contacts [1, 5], right contacts [3, 7]):

    [1, 3) L->R    [3, 5) R->L    [5, 7) L->R    [7, 1) R->L wrapped
"""

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class StanceInterval:
    """Time interval between two consecutive contacts of opposite feet."""

    left: float
    right: float
    is_order_left_right: bool  # True: left foot contact opens the interval

    @property
    def is_wrapped(self) -> bool:
        """True if the interval crosses the loop point of the clip."""
        return self.left > self.right

    def span(self, duration: float) -> float:
        """Length of the interval, continuing past the loop point when wrapped."""
        if self.is_wrapped:
            return self.right + duration - self.left
        return self.right - self.left

    def strictly_contains(self, time: float) -> bool:
        """True if time lies inside the open interval (left, right)."""
        if self.is_wrapped:
            return time > self.left or time < self.right
        return self.left < time < self.right

    def contains(self, time: float) -> bool:
        """True if time lies inside the half-open interval [left, right)."""
        if self.is_wrapped:
            return time >= self.left or time < self.right
        return self.left <= time < self.right


def markers_interleave(left_markers: Sequence[float], right_markers: Sequence[float]) -> bool:
    """
    Check that sorted contact lists alternate feet over one cycle.

    The foot whose first contact comes earlier leads; every contact of the
    leading foot must be followed by a contact of the other foot before the
    leading foot touches down again. Simultaneous contacts do not alternate.

    Args:
        left_markers: Sorted left-foot contact times
        right_markers: Sorted right-foot contact times

    Returns:
        bool: True if the merged sequence alternates feet
    """
    if not left_markers or len(left_markers) != len(right_markers):
        return False

    if left_markers[0] < right_markers[0]:
        leading, trailing = left_markers, right_markers
    else:
        leading, trailing = right_markers, left_markers

    merged = []
    for lead, trail in zip(leading, trailing):
        merged.extend([lead, trail])

    return all(a < b for a, b in zip(merged, merged[1:]))


def build_stance_intervals(left_markers: Sequence[float], right_markers: Sequence[float]) -> List[StanceInterval]:
    """
    Build the alternating stance intervals for one animation.

    Args:
        left_markers: Sorted left-foot contact times
        right_markers: Sorted right-foot contact times (same length)

    Returns:
        list: StanceInterval objects in cycle order; the last one is wrapped
    """
    count = len(left_markers)
    intervals = []

    if left_markers[0] < right_markers[0]:
        for i in range(count):
            intervals.append(StanceInterval(left_markers[i], right_markers[i], True))
            # Last interval closes over the loop point
            next_left = left_markers[0] if i == count - 1 else left_markers[i + 1]
            intervals.append(StanceInterval(right_markers[i], next_left, False))
    else:
        for i in range(count):
            intervals.append(StanceInterval(right_markers[i], left_markers[i], False))
            next_right = right_markers[0] if i == count - 1 else right_markers[i + 1]
            intervals.append(StanceInterval(left_markers[i], next_right, True))

    return intervals


def covered_duration(intervals: Sequence[StanceInterval], duration: float) -> float:
    """Total time covered by the intervals, counting wrapped spans across the loop point."""
    return float(sum(interval.span(duration) for interval in intervals))
