"""perfxray: flame graphs and snapshot comparison for instrumented method calls."""

from perfxray.analysis import (
    CallRecord,
    ComparisonResult,
    DiffType,
    FlameGraph,
    FlameNode,
    MethodStats,
    build_flame_graph,
    compare_snapshots,
)

__version__ = "0.1.0"

__all__ = [
    "CallRecord",
    "ComparisonResult",
    "DiffType",
    "FlameGraph",
    "FlameNode",
    "MethodStats",
    "build_flame_graph",
    "compare_snapshots",
]
