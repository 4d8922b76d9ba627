"""Locate the source file that declares a class."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from perfxray.core.config import DEFAULT_SKIP_DIRS

logger = logging.getLogger(__name__)


@dataclass
class FileLocation:
    file_path: str
    found: bool

    def to_dict(self) -> dict:
        return {"filePath": self.file_path, "found": self.found}


def _class_pattern(class_name: str) -> re.Pattern[str]:
    return re.compile(
        r"(?:^|[\s;])(?:export\s+(?:default\s+)?)?(?:abstract\s+)?class\s+"
        + re.escape(class_name)
        + r"(?![\w$])",
        re.MULTILINE,
    )


class FileLocator:
    def __init__(
        self,
        root: str | Path,
        *,
        extensions: Iterable[str] = (".ts", ".tsx"),
        skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    ):
        self.root = Path(root)
        self.extensions = {ext if ext.startswith(".") else f".{ext}" for ext in extensions}
        self.skip_dirs = set(skip_dirs)

    def _include_dir(self, name: str) -> bool:
        return name not in self.skip_dirs and not name.startswith(".")

    def iter_source_files(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if self._include_dir(d))
            for filename in sorted(filenames):
                if filename.startswith("."):
                    continue
                path = Path(dirpath) / filename
                if path.suffix in self.extensions:
                    yield path

    def find_class(self, class_name: str) -> Optional[Path]:
        pattern = _class_pattern(class_name)
        scanned = 0
        for path in self.iter_source_files():
            scanned += 1
            try:
                text = path.read_text(encoding="utf-8", errors="ignore")
            except OSError as exc:
                logger.debug("Skipping unreadable file: path=%s error=%s", path, exc)
                continue
            if pattern.search(text):
                logger.debug("Class located: class=%s path=%s scanned=%d", class_name, path, scanned)
                return path
        logger.info("Class not found: class=%s root=%s scanned=%d", class_name, self.root, scanned)
        return None


def locate_file(class_name: str, root: str | Path, **kwargs) -> FileLocation:
    path = FileLocator(root, **kwargs).find_class(class_name)
    if path is None:
        return FileLocation(file_path="", found=False)
    return FileLocation(file_path=str(path), found=True)
