"""
Unit tests for reference_plot module

Tests cover:
- Figure creation for valid and invalid references
- Saving to disk
"""

import os

import pytest
from matplotlib.figure import Figure

from gait_sync.analysis.gait_reference import build_gait_reference
from gait_sync.visualization import plot_gait_reference


@pytest.mark.unit
class TestPlotGaitReference:
    """Test the diagnostic plot."""

    def test_plot_valid_reference(self, walk_clip):
        reference = build_gait_reference(walk_clip, "foot_l", "foot_r")

        fig = plot_gait_reference(reference, "foot_l", "foot_r")

        assert isinstance(fig, Figure)
        ax = fig.axes[0]
        assert ax.get_xlim() == pytest.approx((0.0, 1.0))
        # Two foot height curves plus one contact line per contact
        assert len(ax.lines) == 4
        # Plain interval shaded once, wrapped interval on both sides of the loop point
        assert len(ax.patches) == 3

    def test_plot_invalid_reference_has_no_shading(self, gait_clip_factory):
        reference = build_gait_reference(gait_clip_factory(right_turn=3), "foot_l", "foot_r")

        fig = plot_gait_reference(reference, "foot_l", "foot_r")

        assert len(fig.axes[0].patches) == 0
        assert "invalid" in fig.axes[0].get_title()

    def test_save_to_file(self, walk_clip, temp_output_dir):
        reference = build_gait_reference(walk_clip, "foot_l", "foot_r")
        path = os.path.join(temp_output_dir, "plots", "walk_reference.png")

        plot_gait_reference(reference, "foot_l", "foot_r", output_path=path)

        assert os.path.exists(path)
