"""Gzip codec for serialized snapshots."""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from pathlib import Path

from perfxray.analysis.models import PerformanceSnapshot
from perfxray.core.errors import CodecError, MalformedInputError

logger = logging.getLogger(__name__)

BEST_COMPRESSION = 9


def compress_snapshot(snapshot_json: str, level: int = BEST_COMPRESSION) -> bytes:
    return gzip.compress(snapshot_json.encode("utf-8"), compresslevel=level)


def decompress_snapshot(data: bytes) -> str:
    try:
        return gzip.decompress(data).decode("utf-8")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as exc:
        raise CodecError(f"Decompression error: {exc}") from exc


def write_snapshot(
    path: Path, snapshot: PerformanceSnapshot, level: int = BEST_COMPRESSION
) -> Path:
    text = json.dumps(snapshot.to_dict())
    data = compress_snapshot(text, level=level)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(
        "Stored snapshot: path=%s raw_bytes=%d compressed_bytes=%d", path, len(text), len(data)
    )
    return path


def read_snapshot_text(path: Path) -> str:
    """Return the JSON text of a snapshot file, decompressing ``.gz`` files."""
    path = Path(path)
    if path.suffix == ".gz":
        return decompress_snapshot(path.read_bytes())
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"{path} parse error: {exc}") from exc
