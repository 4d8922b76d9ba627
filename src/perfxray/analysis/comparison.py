"""Compare baseline vs current performance snapshots."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional

from perfxray.core.errors import InvalidInputError

from .models import ComparisonResult, ComparisonSummary, DiffType, MethodStats

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_PERCENT = 5.0


def _classify(percentage_change: float, threshold: float) -> DiffType:
    if percentage_change > threshold:
        return DiffType.REGRESSED
    if percentage_change < -threshold:
        return DiffType.IMPROVED
    return DiffType.UNCHANGED


def _compare_pair(method_key: str, base: float, cur: float, threshold: float) -> ComparisonResult:
    absolute_change = cur - base
    percentage_change: Optional[float]
    if base == 0.0:
        # No relative change exists against a zero baseline; report the
        # direction only and leave the percentage empty.
        if cur == 0.0:
            percentage_change, diff_type = 0.0, DiffType.UNCHANGED
        else:
            percentage_change = None
            diff_type = DiffType.REGRESSED if cur > 0 else DiffType.IMPROVED
    else:
        percentage_change = 100.0 * (cur - base) / base
        if math.isfinite(percentage_change):
            diff_type = _classify(percentage_change, threshold)
        else:
            # Baseline too small for the ratio to be representable.
            percentage_change = None
            diff_type = DiffType.REGRESSED if absolute_change > 0 else DiffType.IMPROVED
    return ComparisonResult(
        method_key=method_key,
        baseline_avg=base,
        current_avg=cur,
        percentage_change=percentage_change,
        absolute_change=absolute_change,
        diff_type=diff_type,
    )


def _sort_key(result: ComparisonResult) -> tuple[float, str]:
    return (-abs(result.absolute_change or 0.0), result.method_key)


def compare_snapshots(
    baseline: Mapping[str, MethodStats],
    current: Mapping[str, MethodStats],
    threshold: float = DEFAULT_THRESHOLD_PERCENT,
) -> list[ComparisonResult]:
    """Diff per-method averages; largest absolute change first."""
    if not math.isfinite(threshold) or threshold < 0:
        raise InvalidInputError(f"threshold must be a finite value >= 0, got {threshold!r}")

    results: list[ComparisonResult] = []
    for method_key in set(baseline) | set(current):
        base = baseline.get(method_key)
        cur = current.get(method_key)
        if base is not None and cur is not None:
            results.append(
                _compare_pair(method_key, base.average_duration, cur.average_duration, threshold)
            )
        elif base is not None:
            results.append(
                ComparisonResult(
                    method_key=method_key,
                    baseline_avg=base.average_duration,
                    diff_type=DiffType.REMOVED,
                )
            )
        elif cur is not None:
            results.append(
                ComparisonResult(
                    method_key=method_key,
                    current_avg=cur.average_duration,
                    diff_type=DiffType.NEW,
                )
            )

    results.sort(key=_sort_key)
    summary = summarize_comparison(results)
    logger.info(
        "Snapshots compared: methods=%d regressed=%d improved=%d new=%d removed=%d threshold=%.2f",
        summary.total_methods_compared,
        summary.regressions,
        summary.improvements,
        summary.new_methods,
        summary.removed_methods,
        threshold,
    )
    return results


def summarize_comparison(results: Iterable[ComparisonResult]) -> ComparisonSummary:
    summary = ComparisonSummary()
    for result in results:
        summary.total_methods_compared += 1
        if result.diff_type is DiffType.IMPROVED:
            summary.improvements += 1
        elif result.diff_type is DiffType.REGRESSED:
            summary.regressions += 1
        elif result.diff_type is DiffType.NEW:
            summary.new_methods += 1
        elif result.diff_type is DiffType.REMOVED:
            summary.removed_methods += 1
        else:
            summary.unchanged += 1
    return summary
