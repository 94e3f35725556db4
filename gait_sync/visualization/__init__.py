"""
Visualization module for Gait Sync.
"""

from gait_sync.visualization.reference_plot import plot_gait_reference

__all__ = [
    'plot_gait_reference'
]
