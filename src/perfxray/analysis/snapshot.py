"""Snapshot aggregation: per-method statistics from raw call records."""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from .models import CallRecord, MethodSnapshot, MethodStats, PerformanceSnapshot, SnapshotMetadata

logger = logging.getLogger(__name__)


def aggregate_calls(records: Iterable[CallRecord]) -> MethodSnapshot:
    """Group call records by ``Class.method`` and average their durations."""
    grouped: dict[str, list[CallRecord]] = {}
    for record in records:
        grouped.setdefault(record.name, []).append(record)

    methods: MethodSnapshot = {}
    for key, calls in grouped.items():
        executions = [c.duration for c in calls]
        file_path = next((c.file_path for c in calls if c.file_path), None)
        line = next((c.line for c in calls if c.line is not None), None)
        methods[key] = MethodStats(
            average_duration=sum(executions) / len(executions),
            executions=executions,
            class_name=calls[0].class_name,
            method_name=calls[0].method_name,
            file_path=file_path,
            line=line,
            last_duration=executions[-1],
        )
    return methods


def build_snapshot(
    name: str,
    records: Iterable[CallRecord],
    *,
    snapshot_id: Optional[str] = None,
    timestamp: Optional[float] = None,
    git_branch: Optional[str] = None,
    git_commit: Optional[str] = None,
) -> PerformanceSnapshot:
    records = list(records)
    methods = aggregate_calls(records)
    if timestamp is None:
        timestamp = time.time() * 1000.0
    metadata = SnapshotMetadata(
        total_methods=len(methods),
        total_calls=sum(len(m.executions) for m in methods.values()),
        capture_start_time=min((r.start_time for r in records), default=0.0),
        capture_end_time=max((r.end_time for r in records), default=0.0),
    )
    snapshot = PerformanceSnapshot(
        id=snapshot_id or str(int(timestamp)),
        name=name,
        timestamp=timestamp,
        git_branch=git_branch,
        git_commit=git_commit,
        methods=methods,
        call_stacks=records,
        metadata=metadata,
    )
    logger.info(
        "Snapshot built: name=%s methods=%d calls=%d",
        name,
        metadata.total_methods,
        metadata.total_calls,
    )
    return snapshot
