"""
Gait Reference Group

Session-scoped cache of gait references for a group of animations, plus the
operations an editor panel triggers on it.

Key features:
- One reference per animation, keyed by object identity
- Invalid references are reported and never cached
- Cached references are reused until cleared or force-rebuilt
- Every operation returns an OperationResult (success flag, message and
  diagnostics) for display instead of raising

Staleness: a cached reference is not invalidated when its animation's
skeleton or length changes. Clear the group or rebuild with
force_rebuild=True after such edits.

Usage:
    group = ReferenceGroup()
    group.build_references(animations, "foot_l", "foot_r")
    result = group.transplant(reference_animation, "Sync")
    print(result.message)
    group.clear()
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gait_sync.analysis.gait_reference import (
    CONTACT_HEIGHT_DROP_THRESHOLD,
    GaitReference,
    PreconditionFailure,
    ReferenceState,
    build_gait_reference,
)
from gait_sync.analysis.phase_transplant import (
    DEFAULT_CONTACT_TRACK_NAME,
    MARKER_TIME_TOLERANCE,
    add_contact_markers,
    transplant_markers,
)


@dataclass
class OperationResult:
    """Outcome of a group operation, ready for display."""

    success: bool
    message: str
    diagnostics: List[str] = field(default_factory=list)
    summary: Optional[object] = None


class ReferenceGroup:
    """
    Cache of gait references for one editing session.

    Args:
        height_drop_threshold (float): Contact stabilization threshold
        tolerance (float): Marker de-duplication tolerance in seconds
    """

    def __init__(self, height_drop_threshold=CONTACT_HEIGHT_DROP_THRESHOLD, tolerance=MARKER_TIME_TOLERANCE):
        self.height_drop_threshold = height_drop_threshold
        self.tolerance = tolerance
        self._references: Dict[int, GaitReference] = {}

    @staticmethod
    def _key(animation):
        return id(animation)

    def __contains__(self, animation):
        return self._key(animation) in self._references

    def __len__(self):
        return len(self._references)

    def get(self, animation) -> Optional[GaitReference]:
        """Cached reference of an animation, or None."""
        return self._references.get(self._key(animation))

    def animations(self):
        """Animations in the group, in insertion order."""
        return [reference.animation for reference in self._references.values()]

    def references(self):
        return list(self._references.values())

    # ------------------------------------------------------------------
    # Build / clear
    # ------------------------------------------------------------------

    def build_reference(self, animation, left_bone, right_bone, force_rebuild=False) -> OperationResult:
        """
        Compute and cache the gait reference of one animation.

        Args:
            animation: Animation clip
            left_bone (str): Left foot bone name
            right_bone (str): Right foot bone name
            force_rebuild (bool): Recompute even if already cached

        Returns:
            OperationResult: success is False if the reference is invalid
        """
        key = self._key(animation)
        if key in self._references:
            if not force_rebuild:
                return OperationResult(True, f"{animation.name} is already in the reference group")

            print(f"🔄 Rebuilding gait reference: {animation.name}")
            self._references.pop(key).state = ReferenceState.REMOVED

        reference = build_gait_reference(animation, left_bone, right_bone, self.height_drop_threshold)
        if not reference.is_valid:
            return OperationResult(False, f"Skipped {animation.name}", list(reference.diagnostics), reference)

        self._references[key] = reference
        return OperationResult(
            True,
            f"Added {animation.name} ({reference.cycle_count} cycle(s), {reference.direction.value})",
            list(reference.diagnostics),
            reference,
        )

    def build_references(self, animations, left_bone, right_bone, force_rebuild=False) -> OperationResult:
        """
        Compute references for a batch; failures skip the animation, never the batch.

        Returns:
            OperationResult: success is False if any animation was skipped
        """
        diagnostics = []
        skipped = []
        for animation in animations:
            result = self.build_reference(animation, left_bone, right_bone, force_rebuild)
            diagnostics.extend(result.diagnostics)
            if not result.success:
                skipped.append(animation.name)

        message = f"Reference group holds {len(self)} animation(s)"
        if skipped:
            message += f"; skipped {len(skipped)}: {', '.join(skipped)}"

        return OperationResult(not skipped, message, diagnostics)

    def clear(self) -> OperationResult:
        """Remove every cached reference."""
        count = len(self._references)
        for reference in self._references.values():
            reference.state = ReferenceState.REMOVED
        self._references.clear()

        print(f"🧹 Cleared reference group ({count} reference(s))")
        return OperationResult(True, f"Cleared {count} reference(s)")

    # ------------------------------------------------------------------
    # Marker operations
    # ------------------------------------------------------------------

    def transplant(self, source_animation, track_name) -> OperationResult:
        """
        Copy a track from the source animation onto every animation in the group.

        Returns:
            OperationResult: summary holds the TransplantSummary on success
        """
        try:
            summary = transplant_markers(source_animation, track_name, self.references(), self.tolerance)
        except PreconditionFailure as e:
            print(f"⚠ Warning: {e}")
            return OperationResult(False, str(e), [str(e)])

        return OperationResult(
            True,
            f"Synced {summary.total_markers} marker(s) and {summary.total_events} event(s) "
            f"across {len(summary.markers_added)} animation(s)",
            summary=summary,
        )

    def add_contact_markers(self, track_name=DEFAULT_CONTACT_TRACK_NAME) -> OperationResult:
        """Write the detected contacts of every animation as sync markers."""
        if not self._references:
            message = "Reference group is empty"
            print(f"⚠ Warning: {message}")
            return OperationResult(False, message, [message])

        written = add_contact_markers(self.references(), track_name)
        return OperationResult(
            True, f"Added {sum(written.values())} contact marker(s) on '{track_name}'", summary=written
        )

    def get_stats(self) -> dict:
        """Group statistics for display."""
        stats = {"reference_count": len(self._references), "references": []}
        for reference in self._references.values():
            stats["references"].append(
                {
                    "animation": reference.animation.name,
                    "direction": reference.direction.value,
                    "cycles": reference.cycle_count,
                    "intervals": len(reference.intervals),
                }
            )
        return stats
