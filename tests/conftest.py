"""
Pytest configuration and shared fixtures for Gait Sync tests

Fixtures:
- gait_clip_factory: Builds synthetic looping locomotion clips with known contacts
- walk_clip: One-cycle forward walk (contacts at 0.25s left, 0.75s right)
- run_clip: One-cycle forward run, shorter and with a different contact layout
- temp_output_dir: Temporary directory for test outputs

Synthetic clip layout:
    Each foot swings along the stride axis as a cosine that peaks at its
    turning frame. Its height is 1.0 at the turning frame, 0.5 on the frame
    before, and 0.0 everywhere else, so with the default threshold the
    contact lands two frames after the turning frame.
"""

import shutil
import tempfile

import numpy as np
import pytest

from gait_sync.analysis.animation import AnimationClip

LEFT_FOOT = "foot_l"
RIGHT_FOOT = "foot_r"
ROOT_BONE = "root"


def _foot_trajectory(frames, turn, period, stride_axis, stride_sign, lateral_offset):
    positions = np.zeros((len(frames), 3))
    positions[:, 0] = lateral_offset
    positions[:, stride_axis] = stride_sign * np.cos(2 * np.pi * (frames - turn) / period)

    offset = (frames - turn) % period
    heights = np.zeros(len(frames))
    heights[offset == 0] = 1.0
    heights[offset == period - 1] = 0.5
    positions[:, 2] = heights
    return positions


def build_gait_clip(
    name="Walk_F",
    duration=1.0,
    period=20,
    cycles=1,
    left_turn=3,
    right_turn=None,
    right_period=None,
    stride_axis=1,
    stride_sign=1.0,
    root_distance=150.0,
):
    """
    Build a looping clip whose feet touch down at predictable frames.

    Args:
        name (str): Clip name (its suffix decides the direction)
        duration (float): Clip length in seconds
        period (int): Frames per gait cycle
        cycles (int): Number of gait cycles in the clip
        left_turn (int): Turning frame of the left foot (contact at +2)
        right_turn (int): Turning frame of the right foot (default: half a period later)
        right_period (int): Stride period of the right foot (default: period)
        stride_axis (int): 0 for lateral clips, 1 for longitudinal clips
        stride_sign (float): 1.0 turns at maxima, -1.0 turns at minima
        root_distance (float): Root travel along Y over the clip

    Returns:
        AnimationClip
    """
    if right_turn is None:
        right_turn = left_turn + period // 2
    right_period = right_period or period

    cycle_frames = period * cycles
    frames = np.arange(cycle_frames + 1)

    bone_positions = {
        LEFT_FOOT: _foot_trajectory(frames, left_turn, period, stride_axis, stride_sign, -0.2),
        RIGHT_FOOT: _foot_trajectory(frames, right_turn, right_period, stride_axis, stride_sign, 0.2),
    }
    root_positions = np.zeros((len(frames), 3))
    root_positions[:, 1] = np.linspace(0.0, root_distance, len(frames))

    return AnimationClip(
        name,
        duration,
        bone_positions,
        root_positions=root_positions,
        bone_parents={ROOT_BONE: None, LEFT_FOOT: ROOT_BONE, RIGHT_FOOT: ROOT_BONE},
        root_bone=ROOT_BONE,
    )


# ========== Animation Fixtures ==========


@pytest.fixture
def gait_clip_factory():
    """Factory for synthetic gait clips (see build_gait_clip)."""
    return build_gait_clip


@pytest.fixture
def walk_clip():
    """Forward walk: 20 frames over 1s, left contact at 0.25s, right at 0.75s."""
    return build_gait_clip("Walk_F", duration=1.0, period=20, left_turn=3)


@pytest.fixture
def run_clip():
    """Forward run: 10 frames over 0.5s, left contact at 0.15s, right at 0.4s."""
    return build_gait_clip("Run_F", duration=0.5, period=10, left_turn=1)


# ========== File System Fixtures ==========


@pytest.fixture
def temp_output_dir():
    """Create a temporary output directory that is cleaned up after test."""
    temp_dir = tempfile.mkdtemp(prefix="gait_sync_test_")
    yield temp_dir
    # Cleanup
    shutil.rmtree(temp_dir, ignore_errors=True)


# ========== Test Markers ==========


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "fbx: Tests requiring FBX SDK")
