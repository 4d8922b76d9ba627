"""Core utilities."""

from .config import AppConfig, load_config
from .errors import (
    CodecError,
    ConfigError,
    InputTooLargeError,
    InvalidInputError,
    MalformedInputError,
    MalformedTraceError,
    PerfXrayError,
)

__all__ = [
    "AppConfig",
    "load_config",
    "PerfXrayError",
    "ConfigError",
    "MalformedInputError",
    "InvalidInputError",
    "MalformedTraceError",
    "InputTooLargeError",
    "CodecError",
]
