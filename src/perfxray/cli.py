"""CLI entrypoint using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from perfxray.analysis import (
    build_flame_graph,
    build_snapshot,
    compare_snapshots,
    parse_call_records,
    parse_method_snapshot,
    summarize_comparison,
)
from perfxray.core.config import AppConfig, load_config
from perfxray.core.errors import PerfXrayError
from perfxray.source import locate_file, parse_method
from perfxray.storage import read_snapshot_text, write_snapshot

app = typer.Typer(help="Flame graphs and snapshot comparison for instrumented method calls")

DEFAULT_CONFIG = "configs/perfxray.yaml"


def _setup(config: str) -> AppConfig:
    try:
        cfg = load_config(config)
    except PerfXrayError as exc:
        _fail(str(exc))
    logging.basicConfig(level=getattr(logging, cfg.log_level.upper(), logging.INFO))
    return cfg


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _read_text(path: str) -> str:
    try:
        return read_snapshot_text(Path(path))
    except OSError as exc:
        _fail(f"Cannot read {path}: {exc}")


def _emit(payload: object, out: Optional[str]) -> None:
    text = json.dumps(payload, indent=2)
    if out:
        Path(out).write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {out}")
    else:
        typer.echo(text)


@app.command()
def flamegraph(
    records: str = typer.Argument(..., help="JSON file with call records"),
    out: Optional[str] = typer.Option(None, help="Write result to this file"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Path to config YAML"),
) -> None:
    # Demo: perfxray flamegraph outputs/calls.json --out outputs/flame.json
    cfg = _setup(config)
    try:
        calls = parse_call_records(_read_text(records), label=records)
        graph = build_flame_graph(calls, max_records=cfg.flame_graph.max_records)
    except PerfXrayError as exc:
        _fail(str(exc))
    _emit(graph.to_dict(), out)


@app.command()
def compare(
    baseline: str = typer.Argument(..., help="Baseline snapshot (.json or .json.gz)"),
    current: str = typer.Argument(..., help="Current snapshot (.json or .json.gz)"),
    threshold: Optional[float] = typer.Option(
        None, help="Regression threshold in percent (default from config)"
    ),
    summary: bool = typer.Option(False, help="Include per-type counts"),
    out: Optional[str] = typer.Option(None, help="Write result to this file"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Path to config YAML"),
) -> None:
    # Demo: perfxray compare snapshots/before.json.gz snapshots/after.json.gz --threshold 5
    cfg = _setup(config)
    if threshold is None:
        threshold = cfg.comparison.threshold_percent
    try:
        base = parse_method_snapshot(_read_text(baseline), label="Baseline")
        cur = parse_method_snapshot(_read_text(current), label="Current")
        results = compare_snapshots(base, cur, threshold)
    except PerfXrayError as exc:
        _fail(str(exc))
    payload: object = [r.to_dict() for r in results]
    if summary:
        payload = {"results": payload, "summary": summarize_comparison(results).to_dict()}
    _emit(payload, out)


@app.command()
def snapshot(
    records: str = typer.Argument(..., help="JSON file with call records"),
    name: str = typer.Option(..., help="Snapshot name"),
    out: str = typer.Option(..., help="Destination .json.gz file"),
    git_branch: Optional[str] = typer.Option(None, help="Branch the capture was taken on"),
    git_commit: Optional[str] = typer.Option(None, help="Commit the capture was taken on"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Path to config YAML"),
) -> None:
    # Demo: perfxray snapshot outputs/calls.json --name before-refactor --out snapshots/before.json.gz
    cfg = _setup(config)
    try:
        calls = parse_call_records(_read_text(records), label=records)
    except PerfXrayError as exc:
        _fail(str(exc))
    snap = build_snapshot(name, calls, git_branch=git_branch, git_commit=git_commit)
    path = write_snapshot(Path(out), snap, level=cfg.codec.compression_level)
    typer.echo(
        f"Stored snapshot {snap.id} at {path} "
        f"methods={snap.metadata.total_methods} calls={snap.metadata.total_calls}"
    )


@app.command()
def locate(
    class_name: str = typer.Argument(..., help="Class to look for"),
    root: str = typer.Option(".", help="Workspace root to scan"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Path to config YAML"),
) -> None:
    # Demo: perfxray locate UserListComponent --root ../web-app
    cfg = _setup(config)
    location = locate_file(
        class_name,
        root,
        extensions=cfg.locator.extensions,
        skip_dirs=cfg.locator.skip_dirs,
    )
    typer.echo(json.dumps(location.to_dict()))
    if not location.found:
        raise typer.Exit(code=1)


@app.command("parse-method")
def parse_method_cmd(
    file: str = typer.Argument(..., help="Source file"),
    method: str = typer.Argument(..., help="Method name"),
    config: str = typer.Option(DEFAULT_CONFIG, help="Path to config YAML"),
) -> None:
    # Demo: perfxray parse-method src/app/user-list.component.ts ngOnInit
    _setup(config)
    try:
        text = Path(file).read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        _fail(f"Cannot read {file}: {exc}")
    location = parse_method(text, method)
    typer.echo(json.dumps(location.to_dict()))
    if not location.found:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
