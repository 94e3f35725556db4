"""
Unit tests for reference_export module

Tests cover:
- Interval CSV rows (order label, wrap flag, span)
- Contact CSV across several references
- JSON export of valid and invalid references
"""

import csv
import json
import os

import pytest

from gait_sync.analysis.gait_reference import build_gait_reference
from gait_sync.analysis.reference_export import (
    CONTACT_HEADER,
    INTERVAL_HEADER,
    export_contacts_csv,
    export_reference_csv,
    export_reference_json,
)


def _read_rows(path):
    with open(path, "r") as f:
        return list(csv.DictReader(f))


@pytest.mark.unit
class TestExportReferenceCsv:
    """Test interval CSV output."""

    def test_interval_rows(self, walk_clip, temp_output_dir):
        reference = build_gait_reference(walk_clip, "foot_l", "foot_r")
        path = os.path.join(temp_output_dir, "nested", "gait_intervals.csv")

        count = export_reference_csv(reference, path)

        rows = _read_rows(path)
        assert count == 2
        assert list(rows[0].keys()) == INTERVAL_HEADER
        assert rows[0]["Order"] == "LeftRight"
        assert rows[0]["Wrapped"] == "False"
        assert rows[1]["Order"] == "RightLeft"
        assert rows[1]["Wrapped"] == "True"
        assert float(rows[1]["Span"]) == pytest.approx(0.5)

    def test_invalid_reference_writes_header_only(self, gait_clip_factory, temp_output_dir):
        reference = build_gait_reference(gait_clip_factory(right_turn=3), "foot_l", "foot_r")
        path = os.path.join(temp_output_dir, "gait_intervals.csv")

        assert export_reference_csv(reference, path) == 0
        assert _read_rows(path) == []


@pytest.mark.unit
class TestExportContactsCsv:
    """Test contact CSV output."""

    def test_contacts_of_all_references(self, walk_clip, run_clip, temp_output_dir):
        references = [
            build_gait_reference(walk_clip, "foot_l", "foot_r"),
            build_gait_reference(run_clip, "foot_l", "foot_r"),
        ]
        path = os.path.join(temp_output_dir, "gait_contacts.csv")

        count = export_contacts_csv(references, path)

        rows = _read_rows(path)
        assert count == 4
        assert list(rows[0].keys()) == CONTACT_HEADER
        assert [(r["Animation"], r["Foot"], float(r["Time"])) for r in rows] == [
            ("Walk_F", "Left", 0.25),
            ("Walk_F", "Right", 0.75),
            ("Run_F", "Left", 0.15),
            ("Run_F", "Right", 0.4),
        ]


@pytest.mark.unit
class TestExportReferenceJson:
    """Test JSON output."""

    def test_valid_reference(self, walk_clip, temp_output_dir):
        reference = build_gait_reference(walk_clip, "foot_l", "foot_r")
        path = os.path.join(temp_output_dir, "gait_reference.json")

        export_reference_json(reference, path)

        with open(path, "r") as f:
            data = json.load(f)
        assert data["animation"] == "Walk_F"
        assert data["direction"] == "forward"
        assert data["state"] == "valid"
        assert data["left_contacts"] == [0.25]
        assert data["intervals"][1] == {"left": 0.75, "right": 0.25, "order": "RightLeft", "wrapped": True}

    def test_invalid_reference_keeps_diagnostics(self, walk_clip, temp_output_dir):
        reference = build_gait_reference(walk_clip, "foot_l", "toe_r")
        path = os.path.join(temp_output_dir, "gait_reference.json")

        export_reference_json(reference, path)

        with open(path, "r") as f:
            data = json.load(f)
        assert data["state"] == "invalid"
        assert data["intervals"] == []
        assert data["diagnostics"] == ["Bone toe_r not found in animation Walk_F"]
