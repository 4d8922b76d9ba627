"""Flame graph builder.

Turns the flat call records emitted by the probe into a forest of
:class:`FlameNode` trees.  Records reference their caller through
``parent_call_id``; records without a parent are roots.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from perfxray.core.errors import InputTooLargeError, InvalidInputError, MalformedTraceError

from .models import CallRecord, FlameGraph, FlameNode

logger = logging.getLogger(__name__)


def _index_records(records: Iterable[CallRecord]) -> tuple[dict[str, CallRecord], int]:
    # Last record wins; the id keeps the position where it was first seen.
    by_id: dict[str, CallRecord] = {}
    duplicates = 0
    for record in records:
        if record.call_id in by_id:
            duplicates += 1
        by_id[record.call_id] = record
    return by_id, duplicates


def _percentage(value: float, total_duration: float) -> float:
    if total_duration <= 0:
        return 0.0
    percentage = value / total_duration * 100.0
    if not math.isfinite(percentage):
        raise InvalidInputError(
            f"call duration {value!r} is out of range against total {total_duration!r}"
        )
    return percentage


def _make_node(
    record: CallRecord, children: list[FlameNode], depth: int, total_duration: float
) -> FlameNode:
    children_time = sum(child.value for child in children)
    return FlameNode(
        id=record.call_id,
        name=record.name,
        value=record.duration,
        self_value=max(0.0, record.duration - children_time),
        children=children,
        depth=depth,
        file_path=record.file_path,
        line=record.line,
        percentage=_percentage(record.duration, total_duration),
    )


def _assemble(
    root_id: str,
    by_id: dict[str, CallRecord],
    children_index: dict[str, list[str]],
    total_duration: float,
    visited: set[str],
) -> FlameNode:
    """Build one tree bottom-up with an explicit stack (post-order)."""
    built: dict[str, FlameNode] = {}
    stack: list[tuple[str, int, bool]] = [(root_id, 0, False)]
    while stack:
        call_id, depth, expanded = stack.pop()
        child_ids = children_index.get(call_id, [])
        if expanded:
            children = [built.pop(child_id) for child_id in child_ids]
            built[call_id] = _make_node(by_id[call_id], children, depth, total_duration)
            continue
        if call_id in visited:
            raise MalformedTraceError(f"call {call_id!r} reached twice while building trace")
        visited.add(call_id)
        stack.append((call_id, depth, True))
        for child_id in reversed(child_ids):
            stack.append((child_id, depth + 1, False))
    return built.pop(root_id)


def _count_orphans(by_id: dict[str, CallRecord], visited: set[str]) -> int:
    """Classify records unreachable from any root.

    A parent chain that ends at an unknown call id is an orphan and is
    dropped.  A chain that loops back on itself is a cycle.
    """
    dangling: set[str] = set()
    for call_id in by_id:
        if call_id in visited or call_id in dangling:
            continue
        chain: list[str] = []
        on_chain: set[str] = set()
        current: Optional[str] = call_id
        while current in by_id and current not in dangling:
            if current in on_chain:
                raise MalformedTraceError(
                    f"cyclic parent reference: {' -> '.join(chain + [current])}"
                )
            chain.append(current)
            on_chain.add(current)
            current = by_id[current].parent_call_id
        dangling.update(chain)
    return len(dangling)


def build_flame_graph(records: Iterable[CallRecord], *, max_records: int = 0) -> FlameGraph:
    """Assemble call records into a flame graph forest.

    ``max_records`` bounds the trace size; ``0`` disables the check.
    """
    records = list(records)
    if max_records and len(records) > max_records:
        raise InputTooLargeError(
            f"trace has {len(records)} records, limit is {max_records}"
        )
    if not records:
        return FlameGraph(nodes=[], total_duration=0.0)

    by_id, duplicates = _index_records(records)
    if duplicates:
        logger.warning("Flame graph input has duplicate call ids: count=%d", duplicates)

    roots: list[str] = []
    children_index: dict[str, list[str]] = {}
    for call_id, record in by_id.items():
        if record.parent_call_id is None:
            roots.append(call_id)
        else:
            children_index.setdefault(record.parent_call_id, []).append(call_id)

    total_duration = sum(by_id[root_id].duration for root_id in roots)
    if not math.isfinite(total_duration):
        raise InvalidInputError("sum of root call durations overflows")

    visited: set[str] = set()
    nodes = [
        _assemble(root_id, by_id, children_index, total_duration, visited)
        for root_id in roots
    ]

    orphans = 0
    if len(visited) < len(by_id):
        orphans = _count_orphans(by_id, visited)
        logger.warning("Dropped orphaned calls with unknown parent: count=%d", orphans)

    logger.info(
        "Flame graph built: records=%d roots=%d orphans=%d total_duration=%.3f",
        len(by_id),
        len(roots),
        orphans,
        total_duration,
    )
    return FlameGraph(nodes=nodes, total_duration=total_duration)
