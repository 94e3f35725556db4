"""
Gait Reference Module

Builds the gait-phase reference of a looping locomotion clip from the
trajectories of its two foot bones.

Algorithm (per foot):
1. Turning-point detection: a frame whose stride-axis coordinate is a strict
   local extremum (circular neighbours) marks the end of a swing. The stride
   axis and extremum kind come from the clip's direction tag.
2. Stabilization: the foot may still be descending at the turning point.
   Walk forward while the per-frame height drop stays at or above the
   threshold; the key after the first smaller drop is the contact time.

The sorted left and right contact times are then paired into alternating
stance intervals that tile the whole loop (see stance_intervals).

A reference is invalid when either foot yields no contacts, the feet yield
different contact counts, or the contacts do not alternate. Invalid
references carry their diagnostics and no intervals; callers skip them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np

from gait_sync.analysis.direction import AXIS_VERTICAL, Direction, classify_direction, movement_axis
from gait_sync.analysis.stance_intervals import StanceInterval, build_stance_intervals, markers_interleave

# ==============================================================================
# CONSTANTS
# ==============================================================================

# Minimum per-frame height drop (root space units) for the foot to count as
# still descending after a turning point
CONTACT_HEIGHT_DROP_THRESHOLD = 0.25


# ==============================================================================
# ERRORS
# ==============================================================================


class GaitSyncError(Exception):
    """Base class for recoverable gait sync failures."""


class PreconditionFailure(GaitSyncError):
    """Missing bone, missing track, unset reference or mismatched contacts."""


class DetectionFailure(GaitSyncError):
    """Contact detection could not converge for a foot."""


# ==============================================================================
# REFERENCE MODEL
# ==============================================================================


class ReferenceState(Enum):
    UNINITIALIZED = "uninitialized"
    VALID = "valid"
    INVALID = "invalid"
    REMOVED = "removed"


@dataclass(eq=False)
class GaitReference:
    """Stance-interval parameterization of one animation's gait cycle."""

    animation: object
    direction: Direction
    left_markers: List[float] = field(default_factory=list)
    right_markers: List[float] = field(default_factory=list)
    intervals: List[StanceInterval] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    state: ReferenceState = ReferenceState.UNINITIALIZED

    @property
    def is_valid(self) -> bool:
        return self.state == ReferenceState.VALID

    @property
    def duration(self) -> float:
        return self.animation.duration

    @property
    def cycle_count(self) -> int:
        """Number of full gait cycles (one left and one right contact each)."""
        return len(self.left_markers) if self.is_valid else 0

    def invalidate(self, message):
        """Mark the reference invalid and record why."""
        print(f"⚠ Warning: {message}")
        self.diagnostics.append(message)
        self.state = ReferenceState.INVALID
        self.intervals = []


# ==============================================================================
# CONTACT DETECTION
# ==============================================================================


def is_turning_point(previous, current, following, direction):
    """
    Check whether the current frame ends a stride along the movement axis.

    Args:
        previous: Root-relative position (x, y, z) at the previous frame
        current: Position at the current frame
        following: Position at the next frame
        direction (Direction): Clip direction tag

    Returns:
        bool: True if the stride-axis coordinate is a strict local extremum
    """
    axis, seek_maximum = movement_axis(direction)
    p, c, n = previous[axis], current[axis], following[axis]

    if seek_maximum:
        return p < c and c > n
    return p > c and c < n


def sample_bone_cycle(animation, bone_name):
    """
    Sample a bone's root-relative positions over one loop cycle.

    Returns:
        np.array: (cycle_frames, 3) positions; the closing key is excluded
    """
    cycle_frames = max(animation.frame_count - 1, 0)
    positions = [animation.get_bone_position_relative_to_root(bone_name, frame) for frame in range(cycle_frames)]
    return np.array(positions, dtype=float).reshape(cycle_frames, 3)


def detect_contact_times(animation, bone_name, direction, height_drop_threshold=CONTACT_HEIGHT_DROP_THRESHOLD):
    """
    Detect the contact times of one foot over the loop cycle.

    Args:
        animation: Animation clip (see animation.AnimationClip)
        bone_name (str): Foot bone name
        direction (Direction): Clip direction tag
        height_drop_threshold (float): Minimum per-frame drop of a descending foot

    Returns:
        list: Sorted contact times in seconds, within [0, duration)

    Raises:
        DetectionFailure: If a stabilization walk makes a full revolution
                          without the foot settling
    """
    positions = sample_bone_cycle(animation, bone_name)
    cycle_frames = len(positions)
    if cycle_frames == 0:
        return []

    # Pass 1: turning points with circular neighbours
    turning_frames = []
    for frame in range(cycle_frames):
        previous = positions[(frame - 1) % cycle_frames]
        following = positions[(frame + 1) % cycle_frames]
        if is_turning_point(previous, positions[frame], following, direction):
            turning_frames.append(frame)

    # Pass 2: walk forward until the foot stops descending
    heights = positions[:, AXIS_VERTICAL]
    contacts = []
    for start_frame in turning_frames:
        frame = start_frame
        for _ in range(cycle_frames):
            next_frame = (frame + 1) % cycle_frames
            if heights[frame] - heights[next_frame] < height_drop_threshold:
                contacts.append(animation.time_at_frame(next_frame))
                break
            frame = next_frame
        else:
            raise DetectionFailure(
                f"{bone_name} in {animation.name} never stabilized after turning point at frame {start_frame}"
            )

    return sorted(contacts)


# ==============================================================================
# BUILD
# ==============================================================================


def build_gait_reference(animation, left_bone, right_bone, height_drop_threshold=CONTACT_HEIGHT_DROP_THRESHOLD, direction=None):
    """
    Build the gait reference of an animation.

    Detection problems never raise; they leave the reference invalid with a
    diagnostic explaining why.

    Args:
        animation: Animation clip
        left_bone (str): Left foot bone name
        right_bone (str): Right foot bone name
        height_drop_threshold (float): See detect_contact_times
        direction (Direction, optional): Override the name-derived direction

    Returns:
        GaitReference: Valid reference with intervals, or an invalid one
    """
    if direction is None:
        direction, warning = classify_direction(animation.name)
    else:
        warning = None

    reference = GaitReference(animation, direction)
    if warning:
        reference.diagnostics.append(warning)

    for bone_name in (left_bone, right_bone):
        if not animation.has_bone(bone_name):
            reference.invalidate(f"Bone {bone_name} not found in animation {animation.name}")
            return reference
        # Skeleton bones whose scene node could not be sampled
        if not animation.has_bone_data(bone_name):
            reference.invalidate(f"Bone {bone_name} has no sampled positions in animation {animation.name}")
            return reference

    try:
        left_markers = detect_contact_times(animation, left_bone, direction, height_drop_threshold)
        right_markers = detect_contact_times(animation, right_bone, direction, height_drop_threshold)
    except DetectionFailure as e:
        reference.invalidate(f"Reference calculation failed for {animation.name}: {e}")
        return reference

    reference.left_markers = left_markers
    reference.right_markers = right_markers

    if not left_markers or not right_markers or len(left_markers) != len(right_markers):
        reference.invalidate(
            f"Reference calculation failed for {animation.name}: "
            f"left: {len(left_markers)}, right: {len(right_markers)}"
        )
        return reference

    if not markers_interleave(left_markers, right_markers):
        reference.invalidate(
            f"Reference calculation failed for {animation.name}: "
            f"left and right contacts do not alternate (left: {left_markers}, right: {right_markers})"
        )
        return reference

    reference.intervals = build_stance_intervals(left_markers, right_markers)
    reference.state = ReferenceState.VALID
    print(f"✓ Gait reference built for {animation.name}: {len(left_markers)} cycle(s), {direction.value}")

    return reference
