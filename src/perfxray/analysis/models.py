"""Data model shared by the flame graph builder and the snapshot comparator.

Attributes are snake_case in Python; the wire format produced by the
instrumentation probe and consumed by the editor views is camelCase.  Every
model accepts both spellings on input and emits camelCase on output.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CallRecord(WireModel):
    """One captured method invocation."""

    call_id: str
    class_name: str
    method_name: str
    duration: float = Field(ge=0)
    start_time: float
    end_time: float
    parent_call_id: Optional[str] = None
    file_path: Optional[str] = None
    line: Optional[int] = Field(default=None, ge=0)

    @property
    def name(self) -> str:
        return f"{self.class_name}.{self.method_name}"


class FlameNode(WireModel):
    id: str
    name: str
    value: float
    self_value: float
    children: list["FlameNode"] = Field(default_factory=list)
    depth: int
    file_path: Optional[str] = None
    line: Optional[int] = None
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @model_serializer(mode="wrap")
    def _omit_empty_children(self, handler):
        # Leaf nodes carry no "children" key on the wire.
        data = handler(self)
        if isinstance(data, dict) and not data.get("children"):
            data.pop("children", None)
        return data

    def walk(self):
        """Yield this node and its descendants depth-first, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class FlameGraph(WireModel):
    nodes: list[FlameNode] = Field(default_factory=list)
    total_duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MethodStats(WireModel):
    """Aggregated timings for one method within a snapshot."""

    average_duration: float = Field(ge=0)
    executions: list[float] = Field(default_factory=list)
    class_name: Optional[str] = None
    method_name: Optional[str] = None
    file_path: Optional[str] = None
    line: Optional[int] = None
    last_duration: Optional[float] = None
    change_detection_count: Optional[int] = None


# method key ("Class.method") -> stats
MethodSnapshot = dict[str, MethodStats]


class DiffType(str, Enum):
    IMPROVED = "improved"
    REGRESSED = "regressed"
    NEW = "new"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class ComparisonResult(WireModel):
    method_key: str
    baseline_avg: Optional[float] = None
    current_avg: Optional[float] = None
    percentage_change: Optional[float] = None
    absolute_change: Optional[float] = None
    diff_type: DiffType


class ComparisonSummary(WireModel):
    total_methods_compared: int = 0
    improvements: int = 0
    regressions: int = 0
    unchanged: int = 0
    new_methods: int = 0
    removed_methods: int = 0


class SnapshotMetadata(WireModel):
    total_methods: int = 0
    total_calls: int = 0
    capture_start_time: float = 0.0
    capture_end_time: float = 0.0


class PerformanceSnapshot(WireModel):
    """Point-in-time capture: per-method aggregates plus the raw call records."""

    id: str
    name: str
    timestamp: float
    git_branch: Optional[str] = None
    git_commit: Optional[str] = None
    methods: MethodSnapshot = Field(default_factory=dict)
    call_stacks: list[CallRecord] = Field(default_factory=list)
    metadata: SnapshotMetadata = SnapshotMetadata()
