"""FastAPI application."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from perfxray.analysis import (
    build_flame_graph,
    compare_snapshots,
    parse_call_records,
    parse_method_snapshot,
    summarize_comparison,
)
from perfxray.analysis.models import WireModel
from perfxray.core.config import load_config
from perfxray.core.errors import (
    InputTooLargeError,
    InvalidInputError,
    MalformedInputError,
    MalformedTraceError,
)

CONFIG_PATH = os.getenv("PERFXRAY_CONFIG", "configs/perfxray.yaml")
APP_CONFIG = load_config(CONFIG_PATH)

app = FastAPI(title="perfxray API", version="0.1.0")
logging.basicConfig(level=getattr(logging, APP_CONFIG.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CompareRequest(WireModel):
    baseline: dict[str, Any]
    current: dict[str, Any]
    threshold_percent: Optional[float] = None


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(MalformedInputError)
@app.exception_handler(InvalidInputError)
@app.exception_handler(MalformedTraceError)
async def unprocessable(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("API: rejected %s %s: %s", request.method, request.url.path, exc)
    return _error(422, exc)


@app.exception_handler(InputTooLargeError)
async def too_large(request: Request, exc: InputTooLargeError) -> JSONResponse:
    logger.warning("API: rejected %s %s: %s", request.method, request.url.path, exc)
    return _error(413, exc)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/flamegraph")
def flamegraph(payload: Any = Body(...)) -> dict:
    records = parse_call_records(payload)
    graph = build_flame_graph(records, max_records=APP_CONFIG.flame_graph.max_records)
    return graph.to_dict()


@app.post("/compare")
def compare(request: CompareRequest) -> dict:
    threshold = request.threshold_percent
    if threshold is None:
        threshold = APP_CONFIG.comparison.threshold_percent
    baseline = parse_method_snapshot(request.baseline, label="Baseline")
    current = parse_method_snapshot(request.current, label="Current")
    results = compare_snapshots(baseline, current, threshold)
    return {
        "results": [r.to_dict() for r in results],
        "summary": summarize_comparison(results).to_dict(),
    }
