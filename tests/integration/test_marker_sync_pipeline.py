"""
Integration tests for the full marker sync pipeline

Covers the workflow of an editor session:
1. Select a locomotion group by name
2. Build gait references (invalid clips are skipped)
3. Write contact markers, author a sync track on one clip
4. Transplant the track to every clip at the same gait phase
5. Export the references and plot one of them
"""

import os

import pytest

from gait_sync import ReferenceGroup
from gait_sync.analysis.phase_transplant import phase_to_times, time_to_phase
from gait_sync.analysis.playback_rate import apply_root_motion_speed, filter_animations
from gait_sync.analysis.reference_export import export_contacts_csv, export_reference_json
from gait_sync.visualization import plot_gait_reference


@pytest.fixture
def locomotion_set(gait_clip_factory):
    return [
        gait_clip_factory("Walk_F", duration=1.0, period=20, left_turn=3, root_distance=100.0),
        gait_clip_factory("Walk_B", duration=1.2, period=24, left_turn=5, stride_sign=-1.0, root_distance=80.0),
        gait_clip_factory("Walk_L", duration=0.8, period=16, left_turn=9, stride_axis=0, root_distance=60.0),
        gait_clip_factory("Walk_Long_F", duration=2.0, period=20, cycles=2, left_turn=3, root_distance=200.0),
        gait_clip_factory("Walk_Limp_F", left_turn=3, right_turn=3),
        gait_clip_factory("Run_F", duration=0.5, period=10, left_turn=1),
    ]


@pytest.mark.integration
class TestMarkerSyncPipeline:
    """End-to-end reference build and transplant."""

    def test_full_session(self, locomotion_set, temp_output_dir):
        walks = filter_animations(locomotion_set, prefix="Walk")
        assert len(walks) == 5

        group = ReferenceGroup()
        build = group.build_references(walks, "foot_l", "foot_r")
        assert not build.success
        assert "Walk_Limp_F" in build.message
        assert len(group) == 4

        # Every valid reference tiles its own loop
        for reference in group.references():
            total = sum(interval.span(reference.duration) for interval in reference.intervals)
            assert total == pytest.approx(reference.duration)

        source = walks[0]
        track = source.create_notify_track("Sync")
        source.add_sync_marker("Plant", 0.5, track)
        result = group.transplant(source, "Sync")
        assert result.success

        # Walk_F 0.5 is halfway from left to right contact; Walk_Long_F has two such spans
        long_clip = walks[3]
        long_markers = long_clip.markers_on_track(long_clip.find_track_index("Sync"))
        assert [m.time for m in long_markers] == pytest.approx([0.5, 1.5])
        assert result.summary.markers_added["Walk_Long_F"] == 2

        # Each target marker sits at the source phase in its own reference
        for reference in group.references():
            animation = reference.animation
            for marker in animation.markers_on_track(animation.find_track_index("Sync")):
                ratio, order = time_to_phase(reference, marker.time)
                assert order is True
                assert ratio == pytest.approx(0.5)

        contacts = group.add_contact_markers("Contacts")
        assert contacts.summary["Walk_Long_F"] == 4

        csv_path = os.path.join(temp_output_dir, "gait_contacts.csv")
        assert export_contacts_csv(group.references(), csv_path) == 10
        export_reference_json(group.get(long_clip), os.path.join(temp_output_dir, "walk_long.json"))
        assert os.path.exists(os.path.join(temp_output_dir, "walk_long.json"))

        png_path = os.path.join(temp_output_dir, "walk_f.png")
        plot_gait_reference(group.get(source), "foot_l", "foot_r", output_path=png_path)
        assert os.path.exists(png_path)

    def test_transplant_is_idempotent(self, locomotion_set):
        group = ReferenceGroup()
        group.build_references(locomotion_set, "foot_l", "foot_r")
        source = locomotion_set[0]
        track = source.create_notify_track("Sync")
        source.add_sync_marker("Plant", 0.3, track)
        source.add_sync_marker("Pass", 0.9, track)

        group.transplant(source, "Sync")
        first = {a.name: [m.time for m in a.sync_markers] for a in group.animations()}
        group.transplant(source, "Sync")
        second = {a.name: [m.time for m in a.sync_markers] for a in group.animations()}

        assert first.keys() == second.keys()
        for name in first:
            assert second[name] == pytest.approx(first[name])

    def test_round_trip_inside_every_interval(self, locomotion_set):
        group = ReferenceGroup()
        group.build_references(locomotion_set, "foot_l", "foot_r")

        for reference in group.references():
            for interval in reference.intervals:
                for fraction in (0.1, 0.45, 0.9):
                    time = interval.left + interval.span(reference.duration) * fraction
                    if time >= reference.duration:
                        time -= reference.duration
                    ratio, order = time_to_phase(reference, time)
                    assert ratio == pytest.approx(fraction)
                    assert any(t == pytest.approx(time) for t in phase_to_times(reference, ratio, order))

    def test_speed_matched_group(self, locomotion_set):
        walks = filter_animations(locomotion_set, prefix="Walk", postfix="_F")

        scaled = apply_root_motion_speed(walks, 100.0)

        assert [a.name for a in scaled] == ["Walk_F", "Walk_Long_F", "Walk_Limp_F"]
        assert walks[0].rate_scale == pytest.approx(1.0)
        assert walks[1].rate_scale == pytest.approx(1.0)
        assert walks[2].rate_scale == pytest.approx(100.0 / 150.0)
