"""
Movement Direction Classification Module

Assigns a compass direction tag to a locomotion clip from its naming convention.

The direction only decides which root-space axis carries the foot's stride
motion and whether a stride ends at a maximum or a minimum of that axis:

- Lateral clips (L / R) swing the foot along X
- Longitudinal clips (F / B and the four diagonals) swing the foot along Y

Naming convention (case-sensitive suffixes):
    Walk_FL -> left-forward      Walk_F -> forward
    Walk_FR -> right-forward     Walk_B -> backward
    Walk_BL -> left-backward     Walk_R -> right
    Walk_BR -> right-backward    Walk_L -> left
"""

from enum import Enum

# ==============================================================================
# CONSTANTS
# ==============================================================================

# Root-space axis indices (positions are stored X lateral, Y forward, Z up)
AXIS_LATERAL = 0
AXIS_LONGITUDINAL = 1
AXIS_VERTICAL = 2


class Direction(Enum):
    """Compass tag of a locomotion clip."""

    LEFT = "left"
    RIGHT = "right"
    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT_FORWARD = "left-forward"
    RIGHT_FORWARD = "right-forward"
    LEFT_BACKWARD = "left-backward"
    RIGHT_BACKWARD = "right-backward"


# Diagonal suffixes must be tested before the single-letter ones ("Walk_FL" ends with "L")
DIAGONAL_SUFFIXES = [
    ("FL", Direction.LEFT_FORWARD),
    ("FR", Direction.RIGHT_FORWARD),
    ("BL", Direction.LEFT_BACKWARD),
    ("BR", Direction.RIGHT_BACKWARD),
]

CARDINAL_SUFFIXES = [
    ("F", Direction.FORWARD),
    ("B", Direction.BACKWARD),
    ("R", Direction.RIGHT),
    ("L", Direction.LEFT),
]

DEFAULT_DIRECTION = Direction.FORWARD

FORWARD_FAMILY = (Direction.FORWARD, Direction.LEFT_FORWARD, Direction.RIGHT_FORWARD)


# ==============================================================================
# CLASSIFICATION
# ==============================================================================


def classify_direction(animation_name):
    """
    Classify the movement direction of a clip from its name suffix.

    Args:
        animation_name (str): Asset name of the animation clip

    Returns:
        tuple: (Direction, warning) where warning is None when a suffix matched,
               otherwise a diagnostic string (direction falls back to FORWARD)
    """
    for suffix, direction in DIAGONAL_SUFFIXES + CARDINAL_SUFFIXES:
        if animation_name.endswith(suffix):
            return direction, None

    warning = f"No direction assigned for {animation_name}. Check naming convention."
    print(f"⚠ Warning: {warning}")
    return DEFAULT_DIRECTION, warning


def movement_axis(direction):
    """
    Get the trajectory axis and extremum kind that mark a stride turning point.

    Args:
        direction (Direction): Clip direction

    Returns:
        tuple: (axis_index, seek_maximum)
            axis_index: AXIS_LATERAL or AXIS_LONGITUDINAL
            seek_maximum: True if the turning point is a local maximum
    """
    if direction == Direction.LEFT:
        return AXIS_LATERAL, True
    if direction == Direction.RIGHT:
        return AXIS_LATERAL, False

    return AXIS_LONGITUDINAL, direction in FORWARD_FAMILY
