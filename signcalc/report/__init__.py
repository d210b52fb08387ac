"""
signcalc Report Snapshot Module

Numbers-only report data for an external renderer.
"""

from .report_snapshot import (
    RoundingPolicy,
    build_report_snapshot,
    round_by_mode,
    snapshot_to_dataframe,
    to_kgf,
)

__all__ = [
    'RoundingPolicy',
    'build_report_snapshot',
    'round_by_mode',
    'snapshot_to_dataframe',
    'to_kgf',
]
