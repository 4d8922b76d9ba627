"""Source lookup helpers: class file location and method line lookup."""

from .locator import FileLocation, FileLocator, locate_file
from .parser import MethodLocation, find_method_line, parse_method

__all__ = [
    "FileLocation",
    "FileLocator",
    "locate_file",
    "MethodLocation",
    "find_method_line",
    "parse_method",
]
