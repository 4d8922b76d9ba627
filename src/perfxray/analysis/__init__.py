"""Trace and snapshot analysis."""

from .comparison import DEFAULT_THRESHOLD_PERCENT, compare_snapshots, summarize_comparison
from .flame_graph import build_flame_graph
from .models import (
    CallRecord,
    ComparisonResult,
    ComparisonSummary,
    DiffType,
    FlameGraph,
    FlameNode,
    MethodSnapshot,
    MethodStats,
    PerformanceSnapshot,
    SnapshotMetadata,
)
from .payloads import (
    build_flame_graph_json,
    compare_snapshots_json,
    parse_call_records,
    parse_method_snapshot,
)
from .snapshot import aggregate_calls, build_snapshot

__all__ = [
    "CallRecord",
    "FlameNode",
    "FlameGraph",
    "MethodStats",
    "MethodSnapshot",
    "DiffType",
    "ComparisonResult",
    "ComparisonSummary",
    "PerformanceSnapshot",
    "SnapshotMetadata",
    "build_flame_graph",
    "compare_snapshots",
    "summarize_comparison",
    "DEFAULT_THRESHOLD_PERCENT",
    "aggregate_calls",
    "build_snapshot",
    "parse_call_records",
    "parse_method_snapshot",
    "build_flame_graph_json",
    "compare_snapshots_json",
]
