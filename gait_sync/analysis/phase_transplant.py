"""
Phase Marker Transplant Module

Copies sync markers and notify events between animations by gait phase
rather than by absolute time.

A time on the source clip is expressed as a phase ratio inside the stance
interval that contains it, tagged with the interval's foot order. The ratio
is then replayed inside every interval of the target clip with the same foot
order, so a marker placed 40% of the way from a left contact to the next
right contact lands 40% of the way between the matching contacts of every
other clip. Multi-cycle targets receive one copy per matching interval.

Boundary times:
    A time strictly inside an interval uses that interval (last match wins).
    A time exactly on a contact belongs to the interval that opens there
    (half-open [left, right)). Anything else falls back to the last interval.
"""

from dataclasses import dataclass, field, replace
from typing import Dict

from gait_sync.analysis.animation import DEFAULT_TRACK_COLOR
from gait_sync.analysis.gait_reference import PreconditionFailure

# ==============================================================================
# CONSTANTS
# ==============================================================================

# Two markers (or events) closer than this on the same track count as the same marker
MARKER_TIME_TOLERANCE = 0.01

# Track and marker names written by add_contact_markers
DEFAULT_CONTACT_TRACK_NAME = "Default Track"
LEFT_CONTACT_MARKER_NAME = "Marker_l"
RIGHT_CONTACT_MARKER_NAME = "Marker_r"


@dataclass
class TransplantSummary:
    """Per-animation counts of markers and events written by a transplant."""

    source_name: str
    track_name: str
    markers_added: Dict[str, int] = field(default_factory=dict)
    events_added: Dict[str, int] = field(default_factory=dict)

    @property
    def total_markers(self):
        return sum(self.markers_added.values())

    @property
    def total_events(self):
        return sum(self.events_added.values())


# ==============================================================================
# PHASE CONVERSION
# ==============================================================================


def _require_intervals(reference):
    if not reference.is_valid or not reference.intervals:
        raise PreconditionFailure(f"No valid gait reference for {reference.animation.name}")


def find_interval(reference, time):
    """
    Find the stance interval a time belongs to.

    Args:
        reference (GaitReference): Valid reference
        time (float): Time in seconds

    Returns:
        StanceInterval: Containing interval (see module docstring for boundaries)
    """
    _require_intervals(reference)

    target = None
    for interval in reference.intervals:
        if interval.strictly_contains(time):
            target = interval

    if target is None:
        # Exactly on a contact: the interval that opens at this time
        for interval in reference.intervals:
            if interval.contains(time):
                target = interval
                break

    if target is None:
        target = reference.intervals[-1]

    return target


def time_to_phase(reference, time):
    """
    Convert a time into a phase ratio inside its stance interval.

    Args:
        reference (GaitReference): Valid reference of the clip the time belongs to
        time (float): Time in seconds

    Returns:
        tuple: (ratio, is_order_left_right)
            ratio: Position inside the interval, 0 at its opening contact
            is_order_left_right: Foot order of the interval

    Raises:
        PreconditionFailure: If the reference is invalid
    """
    interval = find_interval(reference, time)
    duration = reference.duration

    if not interval.is_wrapped:
        ratio = (time - interval.left) / (interval.right - interval.left)
    else:
        # Past the loop point the interval continues from the start of the clip
        if time < interval.left:
            time += duration
        ratio = (time - interval.left) / (interval.right + duration - interval.left)

    return ratio, interval.is_order_left_right


def phase_to_times(reference, ratio, is_order_left_right):
    """
    Convert a phase ratio into times on every interval with the same foot order.

    Args:
        reference (GaitReference): Valid reference of the target clip
        ratio (float): Phase ratio from time_to_phase
        is_order_left_right (bool): Foot order from time_to_phase

    Returns:
        list: One time per matching interval, in interval order

    Raises:
        PreconditionFailure: If the reference is invalid
    """
    _require_intervals(reference)
    duration = reference.duration

    times = []
    for interval in reference.intervals:
        if interval.is_order_left_right != is_order_left_right:
            continue

        if not interval.is_wrapped:
            times.append(interval.left + (interval.right - interval.left) * ratio)
        else:
            location = interval.left + (interval.right - interval.left + duration) * ratio
            times.append(location - duration if location > duration else location)

    return times


# ==============================================================================
# TRANSPLANT
# ==============================================================================


def _exists_near(items, time, tolerance):
    return any(abs(item.time - time) <= tolerance for item in items)


def transplant_markers(
    source_animation, track_name, references, tolerance=MARKER_TIME_TOLERANCE, track_color=DEFAULT_TRACK_COLOR
):
    """
    Copy a track's sync markers and notify events onto every animation in a group.

    Every valid reference in the group is a target, the source included
    (a multi-cycle source gains copies in its other cycles). On each target
    the named track is created if missing, cleared otherwise, then refilled.

    Args:
        source_animation: Animation holding the markers to copy
        track_name (str): Notify track name (resolved by name on every clip)
        references (list): GaitReference objects of the group
        tolerance (float): Suppress inserts this close to an existing item
        track_color (tuple): RGBA color for newly created tracks

    Returns:
        TransplantSummary: Counts of markers and events added per animation

    Raises:
        PreconditionFailure: If the source has no valid reference in the group,
                             or the track does not exist on the source
    """
    references = list(references)
    source_reference = next((r for r in references if r.animation is source_animation), None)
    if source_reference is None or not source_reference.is_valid:
        raise PreconditionFailure(
            f"Animation {source_animation.name} doesn't belong to the current reference group being processed."
        )

    source_track_index = source_animation.find_track_index(track_name)
    if source_track_index is None:
        raise PreconditionFailure(f"Track {track_name} not found in animation {source_animation.name}.")

    # Copies: the source track is cleared below like every other target
    source_markers = [replace(m) for m in source_animation.markers_on_track(source_track_index)]
    source_events = [replace(e) for e in source_animation.events_on_track(source_track_index)]

    marker_phases = [(m, time_to_phase(source_reference, m.time)) for m in source_markers]
    event_phases = [(e, time_to_phase(source_reference, e.time)) for e in source_events]

    summary = TransplantSummary(source_animation.name, track_name)

    for reference in references:
        if not reference.is_valid:
            continue

        animation = reference.animation
        track_index = animation.find_track_index(track_name)
        if track_index is None:
            track_index = animation.create_notify_track(track_name, track_color)
        else:
            animation.remove_track_contents(track_index)
        animation.refresh_cache_data()

        markers_added = 0
        for marker, (ratio, order) in marker_phases:
            for time in phase_to_times(reference, ratio, order):
                if _exists_near(animation.markers_on_track(track_index), time, tolerance):
                    continue
                if animation.add_sync_marker(marker.name, time, track_index) is not None:
                    markers_added += 1

        events_added = 0
        for event, (ratio, order) in event_phases:
            for time in phase_to_times(reference, ratio, order):
                if _exists_near(animation.events_on_track(track_index), time, tolerance):
                    continue
                if animation.add_notify_event(track_index, time, event.notify_class) is not None:
                    events_added += 1

        animation.refresh_cache_data()
        summary.markers_added[animation.name] = markers_added
        summary.events_added[animation.name] = events_added

    print(
        f"✓ Transplanted track '{track_name}' from {source_animation.name} to {len(summary.markers_added)} animation(s): "
        f"{summary.total_markers} marker(s), {summary.total_events} event(s)"
    )
    return summary


def add_contact_markers(references, track_name=DEFAULT_CONTACT_TRACK_NAME, track_color=DEFAULT_TRACK_COLOR):
    """
    Write every detected foot contact as a sync marker on a fresh track.

    The track is removed and recreated on each animation, so existing
    markers and events on it are discarded.

    Args:
        references (list): GaitReference objects; invalid ones are skipped
        track_name (str): Track to (re)create
        track_color (tuple): RGBA color of the track

    Returns:
        dict: {animation_name: number of markers written}
    """
    written = {}
    for reference in references:
        if not reference.is_valid:
            continue

        animation = reference.animation
        animation.remove_notify_track(track_name)
        track_index = animation.create_notify_track(track_name, track_color)

        count = 0
        for time in reference.left_markers:
            if animation.add_sync_marker(LEFT_CONTACT_MARKER_NAME, time, track_index) is not None:
                count += 1
        for time in reference.right_markers:
            if animation.add_sync_marker(RIGHT_CONTACT_MARKER_NAME, time, track_index) is not None:
                count += 1

        written[animation.name] = count

    return written
