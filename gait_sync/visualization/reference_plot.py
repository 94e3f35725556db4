"""
Gait Reference Plot

Plots both feet's height over one loop cycle together with the detected
contacts and the stance intervals built from them. Useful for checking why a
clip's reference came out invalid or why transplanted markers drift.
"""

import numpy as np
from matplotlib.figure import Figure

from gait_sync.analysis.direction import AXIS_VERTICAL
from gait_sync.analysis.gait_reference import sample_bone_cycle
from gait_sync.analysis.utils import prepare_output_file

LEFT_FOOT_COLOR = "tab:blue"
RIGHT_FOOT_COLOR = "tab:red"
LEFT_RIGHT_SPAN_COLOR = "lightsteelblue"
RIGHT_LEFT_SPAN_COLOR = "mistyrose"


def _shade_interval(ax, interval, duration):
    color = LEFT_RIGHT_SPAN_COLOR if interval.is_order_left_right else RIGHT_LEFT_SPAN_COLOR
    if interval.is_wrapped:
        ax.axvspan(interval.left, duration, color=color, alpha=0.5)
        ax.axvspan(0.0, interval.right, color=color, alpha=0.5)
    else:
        ax.axvspan(interval.left, interval.right, color=color, alpha=0.5)


def plot_gait_reference(reference, left_bone, right_bone, output_path=None):
    """
    Plot foot heights, contacts and stance intervals of a gait reference.

    Args:
        reference (GaitReference): Reference to plot (intervals are skipped if invalid)
        left_bone (str): Left foot bone name
        right_bone (str): Right foot bone name
        output_path (str, optional): Save the figure here (PNG, SVG, ...)

    Returns:
        matplotlib.figure.Figure
    """
    animation = reference.animation
    duration = reference.duration

    fig = Figure(figsize=(10, 4))
    ax = fig.add_subplot(1, 1, 1)

    for interval in reference.intervals:
        _shade_interval(ax, interval, duration)

    for bone, color, contacts in (
        (left_bone, LEFT_FOOT_COLOR, reference.left_markers),
        (right_bone, RIGHT_FOOT_COLOR, reference.right_markers),
    ):
        positions = sample_bone_cycle(animation, bone)
        times = np.array([animation.time_at_frame(frame) for frame in range(len(positions))])
        ax.plot(times, positions[:, AXIS_VERTICAL], color=color, label=bone)
        for contact in contacts:
            ax.axvline(contact, color=color, linestyle="--", linewidth=1)

    ax.set_xlim(0.0, duration)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Foot height")
    ax.set_title(f"{animation.name} ({reference.direction.value}, {reference.state.value})")
    ax.legend(loc="upper right")

    if output_path:
        prepare_output_file(output_path)
        fig.savefig(output_path)

    return fig
