"""Find the declaration line of a class method in TypeScript source.

Lightweight scanner: it tracks brace depth (ignoring strings and comments)
so that only direct members of a class body are considered, then matches
member declarations line by line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

_NOISE = re.compile(
    r"""//.*$|/\*.*?\*/|'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`(?:\\.|[^`\\])*`"""
)
_CLASS = re.compile(r"(?<![\w$.])class\b")
_MEMBER = re.compile(
    r"""^\s*(?:@[\w$.]+(?:\([^)]*\))?\s+)*"""
    r"""(?:(?:public|private|protected|static|async|override|abstract|get|set)\s+)*"""
    r"""\*?\s*(?P<name>\#?[A-Za-z_$][\w$]*|'[^']*'|"[^"]*")\??\s*(?:<[^>(]*>)?\s*\("""
)
_CONTROL = {
    "if", "for", "while", "switch", "catch", "return", "function", "new", "super", "constructor"
}


@dataclass
class MethodLocation:
    line: int
    found: bool

    def to_dict(self) -> dict:
        return {"line": self.line, "found": self.found}


def _member_name(line: str) -> Optional[str]:
    m = _MEMBER.match(line)
    if not m:
        return None
    name = m.group("name")
    if name[0] in "'\"":
        return name[1:-1]
    if name in _CONTROL:
        return None
    return name.lstrip("#")


def _strip_noise(line: str, in_block: bool) -> tuple[str, bool]:
    if in_block:
        end = line.find("*/")
        if end == -1:
            return "", True
        line = line[end + 2 :]
    cleaned = _NOISE.sub("", line)
    start = cleaned.find("/*")
    if start != -1:
        return cleaned[:start], True
    return cleaned, False


def find_method_line(file_content: str, method_name: str) -> Optional[int]:
    """Return the 1-based line of ``method_name``'s declaration, or None."""
    target = method_name.lstrip("#")
    depth = 0
    class_depths: list[int] = []
    pending_class = False
    in_block = False
    for lineno, raw in enumerate(file_content.splitlines(), start=1):
        at_member_level = bool(class_depths) and depth == class_depths[-1]
        if at_member_level and not in_block and _member_name(raw) == target:
            return lineno

        cleaned, in_block = _strip_noise(raw, in_block)
        if _CLASS.search(cleaned):
            pending_class = True
        for ch in cleaned:
            if ch == "{":
                depth += 1
                if pending_class:
                    class_depths.append(depth)
                    pending_class = False
            elif ch == "}":
                if class_depths and class_depths[-1] == depth:
                    class_depths.pop()
                depth = max(0, depth - 1)
    return None


def parse_method(file_content: str, method_name: str) -> MethodLocation:
    line = find_method_line(file_content, method_name)
    if line is None:
        logger.debug("Method not found: method=%s", method_name)
        return MethodLocation(line=0, found=False)
    return MethodLocation(line=line, found=True)
