"""
Gait Sync - phase-preserving sync marker transfer for locomotion animation groups.
"""

__version__ = "1.0.0"

# Convenience imports
from gait_sync.analysis.gait_reference import build_gait_reference
from gait_sync.analysis.reference_group import ReferenceGroup

__all__ = ['build_gait_reference', 'ReferenceGroup']
