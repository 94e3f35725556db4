"""
Gait Reference Export Module

Writes gait references to disk for inspection outside the editor.

Outputs:
- gait_intervals.csv: One row per stance interval
- gait_contacts.csv: One row per detected foot contact
- gait_reference.json: Full reference (direction, contacts, intervals, diagnostics)
"""

import csv
import json

from gait_sync.analysis.utils import convert_numpy_to_native, prepare_output_file

INTERVAL_HEADER = ["Animation", "Index", "Order", "Left", "Right", "Wrapped", "Span"]
CONTACT_HEADER = ["Animation", "Foot", "Time"]


def _order_label(interval):
    return "LeftRight" if interval.is_order_left_right else "RightLeft"


def export_reference_csv(reference, output_path):
    """
    Write the stance intervals of a reference to CSV.

    Args:
        reference (GaitReference): Reference to export (invalid ones write a header only)
        output_path (str): Destination CSV path

    Returns:
        int: Number of interval rows written
    """
    prepare_output_file(output_path)
    name = reference.animation.name

    rows = []
    for index, interval in enumerate(reference.intervals):
        rows.append(
            [
                name,
                index,
                _order_label(interval),
                round(float(interval.left), 6),
                round(float(interval.right), 6),
                interval.is_wrapped,
                round(float(interval.span(reference.duration)), 6),
            ]
        )

    with open(output_path, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(INTERVAL_HEADER)
        w.writerows(rows)

    return len(rows)


def export_contacts_csv(references, output_path):
    """
    Write the foot contacts of several references to one CSV.

    Args:
        references (list): GaitReference objects
        output_path (str): Destination CSV path

    Returns:
        int: Number of contact rows written
    """
    prepare_output_file(output_path)

    rows = []
    for reference in references:
        name = reference.animation.name
        rows.extend([name, "Left", round(float(t), 6)] for t in reference.left_markers)
        rows.extend([name, "Right", round(float(t), 6)] for t in reference.right_markers)

    with open(output_path, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(CONTACT_HEADER)
        w.writerows(rows)

    return len(rows)


def export_reference_json(reference, output_path):
    """
    Write a full reference description to JSON.

    Args:
        reference (GaitReference): Reference to export
        output_path (str): Destination JSON path
    """
    data = {
        "animation": reference.animation.name,
        "duration": reference.duration,
        "direction": reference.direction.value,
        "state": reference.state.value,
        "left_contacts": reference.left_markers,
        "right_contacts": reference.right_markers,
        "intervals": [
            {
                "left": interval.left,
                "right": interval.right,
                "order": _order_label(interval),
                "wrapped": interval.is_wrapped,
            }
            for interval in reference.intervals
        ],
        "diagnostics": reference.diagnostics,
    }

    prepare_output_file(output_path)
    with open(output_path, "w") as f:
        json.dump(convert_numpy_to_native(data), f, indent=2)
