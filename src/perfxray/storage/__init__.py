"""Snapshot storage helpers."""

from .codec import compress_snapshot, decompress_snapshot, read_snapshot_text, write_snapshot

__all__ = [
    "compress_snapshot",
    "decompress_snapshot",
    "read_snapshot_text",
    "write_snapshot",
]
