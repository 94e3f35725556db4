"""
Animation Clip Module

In-memory animation clip holding sampled bone trajectories and notify tracks.

This is the data the gait reference and marker transplant code work against:
- Root-relative bone positions per frame (X lateral, Y forward, Z up)
- Timing (frame count, duration, time-at-frame)
- Notify tracks with their sync markers and notify events

Frame convention:
    A clip stores `frame_count` keys. The last key sits at `time == duration`
    and repeats the first pose of the loop, so one gait cycle spans
    `frame_count - 1` distinct frames.

Notify tracks are identified by name and looked up by linear scan. Markers and
events reference their track by index; removing a track shifts the index of
every later track down by one.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

# ==============================================================================
# CONSTANTS
# ==============================================================================

DEFAULT_TRACK_COLOR = (1.0, 1.0, 1.0, 1.0)  # RGBA, white


@dataclass
class NotifyTrack:
    """Named notify track."""

    name: str
    color: tuple = DEFAULT_TRACK_COLOR


@dataclass
class SyncMarker:
    """Named sync marker on a notify track."""

    name: str
    time: float
    track_index: int


@dataclass
class NotifyEvent:
    """Notify event on a notify track."""

    time: float
    track_index: int
    notify_class: Optional[object] = None
    name: str = ""


def notify_name_for_class(notify_class):
    """Display name of a notify class (class object or plain string)."""
    if notify_class is None:
        return ""
    return getattr(notify_class, "__name__", str(notify_class))


class AnimationClip:
    """
    Sampled animation clip with editable notify tracks.

    Args:
        name (str): Asset name (direction suffixes are read from it)
        duration (float): Play length in seconds
        bone_positions (dict): {bone_name: array (N, 3)} root-relative positions
        root_positions (array, optional): (N, 3) root bone positions in world space
        bone_parents (dict, optional): {bone_name: parent_name} skeleton hierarchy
        root_bone (str, optional): Name of the root bone (always at the origin)
    """

    def __init__(self, name, duration, bone_positions, root_positions=None, bone_parents=None, root_bone=None):
        if duration <= 0:
            raise ValueError(f"Animation {name} must have a positive duration, got {duration}")

        self.name = name
        self.duration = float(duration)
        self.bone_positions: Dict[str, np.ndarray] = {}
        for bone_name, positions in bone_positions.items():
            positions = np.asarray(positions, dtype=float)
            if positions.ndim != 2 or positions.shape[1] != 3:
                raise ValueError(f"Positions for bone '{bone_name}' must have shape (N, 3), got {positions.shape}")
            self.bone_positions[bone_name] = positions

        frame_counts = {len(positions) for positions in self.bone_positions.values()}
        if len(frame_counts) > 1:
            raise ValueError(f"Animation {name} has bones with differing frame counts: {sorted(frame_counts)}")
        self._frame_count = frame_counts.pop() if frame_counts else 0

        self.root_positions = None if root_positions is None else np.asarray(root_positions, dtype=float)
        self.bone_parents = dict(bone_parents or {})
        self.root_bone = root_bone

        self.notify_tracks: List[NotifyTrack] = []
        self.sync_markers: List[SyncMarker] = []
        self.notify_events: List[NotifyEvent] = []
        self.rate_scale = 1.0
        self.cache_revision = 0

    def __repr__(self):
        return f"AnimationClip({self.name!r}, duration={self.duration}, frames={self._frame_count})"

    # ------------------------------------------------------------------
    # Timing and bone sampling
    # ------------------------------------------------------------------

    @property
    def frame_count(self):
        """Number of sampled keys, including the closing key at `duration`."""
        return self._frame_count

    def time_at_frame(self, frame):
        """Time in seconds of a key index."""
        if frame < 0 or frame >= self._frame_count:
            raise IndexError(f"Frame {frame} out of range for {self.name} ({self._frame_count} frames)")
        if self._frame_count < 2:
            return 0.0
        return frame * self.duration / (self._frame_count - 1)

    def has_bone(self, bone_name):
        """True if the bone exists on the clip's skeleton."""
        return bone_name == self.root_bone or bone_name in self.bone_positions or bone_name in self.bone_parents

    def has_bone_data(self, bone_name):
        """True if the bone can be sampled (the root always resolves to the origin)."""
        return bone_name == self.root_bone or bone_name in self.bone_positions

    def get_bone_position_relative_to_root(self, bone_name, frame):
        """
        Get a bone's position relative to the root at a key index.

        The root bone itself always resolves to the origin.

        Raises:
            KeyError: If the bone has no sampled data
            IndexError: If the frame is out of range
        """
        if bone_name == self.root_bone:
            return np.zeros(3)
        if bone_name not in self.bone_positions:
            raise KeyError(f"Bone '{bone_name}' not found in animation {self.name}")
        if frame < 0 or frame >= self._frame_count:
            raise IndexError(f"Frame {frame} out of range for {self.name} ({self._frame_count} frames)")
        return self.bone_positions[bone_name][frame].copy()

    def root_motion_translation(self):
        """Root displacement between the first and last key (zero without root data)."""
        if self.root_positions is None or len(self.root_positions) == 0:
            return np.zeros(3)
        return self.root_positions[-1] - self.root_positions[0]

    # ------------------------------------------------------------------
    # Notify tracks
    # ------------------------------------------------------------------

    def find_track_index(self, track_name):
        """Index of the first track with this name, or None."""
        for index, track in enumerate(self.notify_tracks):
            if track.name == track_name:
                return index
        return None

    def create_notify_track(self, track_name, color=DEFAULT_TRACK_COLOR):
        """
        Create a notify track, replacing any existing track with the same name.

        Returns:
            int: Index of the new track
        """
        if self.find_track_index(track_name) is not None:
            self.remove_notify_track(track_name)

        self.notify_tracks.append(NotifyTrack(track_name, color))
        self.refresh_cache_data()
        return len(self.notify_tracks) - 1

    def remove_notify_track(self, track_name):
        """
        Remove a notify track together with its markers and events.

        Markers and events on later tracks are re-indexed so they keep
        pointing at the same track.

        Returns:
            bool: True if a track was removed
        """
        index_to_delete = self.find_track_index(track_name)
        if index_to_delete is None:
            return False

        self.remove_track_contents(index_to_delete)

        for event in self.notify_events:
            if event.track_index > index_to_delete:
                event.track_index -= 1
        for marker in self.sync_markers:
            if marker.track_index > index_to_delete:
                marker.track_index -= 1

        del self.notify_tracks[index_to_delete]
        self.refresh_cache_data()
        return True

    def remove_track_contents(self, track_index):
        """Remove every sync marker and notify event on a track (the track stays)."""
        self.sync_markers = [m for m in self.sync_markers if m.track_index != track_index]
        self.notify_events = [e for e in self.notify_events if e.track_index != track_index]

    def markers_on_track(self, track_index):
        return [m for m in self.sync_markers if m.track_index == track_index]

    def events_on_track(self, track_index):
        return [e for e in self.notify_events if e.track_index == track_index]

    # ------------------------------------------------------------------
    # Markers and events
    # ------------------------------------------------------------------

    def is_valid_time(self, time):
        return 0.0 <= time <= self.duration

    def _check_track_index(self, track_index):
        if track_index is None or track_index < 0 or track_index >= len(self.notify_tracks):
            raise IndexError(f"Track index {track_index} out of range for {self.name}")

    def add_sync_marker(self, marker_name, time, track_index):
        """
        Add a sync marker to a track.

        Returns:
            SyncMarker: The new marker, or None if time lies outside [0, duration]
        """
        self._check_track_index(track_index)
        if not self.is_valid_time(time):
            return None

        marker = SyncMarker(marker_name, float(time), track_index)
        self.sync_markers.append(marker)
        self.refresh_cache_data()
        return marker

    def add_notify_event(self, track_index, time, notify_class=None):
        """
        Add a notify event to a track.

        Returns:
            NotifyEvent: The new event, or None if time lies outside [0, duration]
        """
        self._check_track_index(track_index)
        if not self.is_valid_time(time):
            return None

        event = NotifyEvent(float(time), track_index, notify_class, notify_name_for_class(notify_class))
        self.notify_events.append(event)
        self.refresh_cache_data()
        return event

    def refresh_cache_data(self):
        """Rebuild derived data after structural edits (time-sorted markers and events)."""
        self.sync_markers.sort(key=lambda m: m.time)
        self.notify_events.sort(key=lambda e: e.time)
        self.cache_revision += 1
