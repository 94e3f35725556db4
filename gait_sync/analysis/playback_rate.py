"""
Playback Rate Module

Group selection and play-rate scaling for locomotion clips.

- filter_animations(): Select clips by name prefix / postfix
- apply_rate_scale(): Set one play rate on every clip
- apply_root_motion_speed(): Derive each clip's play rate from its root motion
  so that all clips cover ground at the same target speed
"""

import numpy as np

# ==============================================================================
# CONSTANTS
# ==============================================================================

# Root translation with every component within this distance counts as no root motion
ROOT_MOTION_NEARLY_ZERO = 0.1


def filter_animations(animations, prefix="", postfix=""):
    """
    Select animations whose names match a prefix and a postfix (case-sensitive).

    An empty prefix or postfix matches everything. A clip selected more than
    once is kept only at its first position.

    Args:
        animations (list): Animation clips
        prefix (str): Required name prefix
        postfix (str): Required name postfix

    Returns:
        list: Matching animations, input order kept
    """
    selected = []
    seen = set()
    for animation in animations:
        if id(animation) in seen:
            continue
        if (not prefix or animation.name.startswith(prefix)) and (not postfix or animation.name.endswith(postfix)):
            seen.add(id(animation))
            selected.append(animation)
    return selected


def apply_rate_scale(animations, rate_scale):
    """Set the same play rate on every animation."""
    for animation in animations:
        animation.rate_scale = float(rate_scale)


def root_motion_speed(animation):
    """
    Average root motion speed of an animation at rate 1.0.

    Returns:
        float: Units per second, or None if the clip has no root motion
    """
    translation = np.asarray(animation.root_motion_translation(), dtype=float)
    if np.all(np.abs(translation) <= ROOT_MOTION_NEARLY_ZERO):
        return None
    return float(np.linalg.norm(translation) / animation.duration)


def apply_root_motion_speed(animations, target_speed):
    """
    Scale each animation's play rate so its root moves at the target speed.

    Animations without root motion are skipped with a warning.

    Args:
        animations (list): Animation clips
        target_speed (float): Desired root speed in units per second

    Returns:
        list: Animations whose rate was changed
    """
    scaled = []
    for animation in animations:
        speed = root_motion_speed(animation)
        if speed is None:
            print(f"⚠ Warning: Animation {animation.name} has no root motion. Skipping.")
            continue

        animation.rate_scale = float(target_speed) / speed
        scaled.append(animation)

    return scaled
