"""Custom exception hierarchy."""


class PerfXrayError(Exception):
    """Base error."""


class ConfigError(PerfXrayError):
    """Invalid configuration."""


class MalformedInputError(PerfXrayError):
    """Input could not be decoded into records or snapshots."""


class InvalidInputError(PerfXrayError):
    """Input decoded fine but an argument is out of range."""


class MalformedTraceError(PerfXrayError):
    """Call records do not form a forest (e.g. cyclic parent references)."""


class InputTooLargeError(PerfXrayError):
    """Trace exceeds the configured record budget."""


class CodecError(PerfXrayError):
    """Snapshot payload could not be compressed or decompressed."""
