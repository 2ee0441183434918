class ConfigurationError(ValueError):
    """Raised when the cache geometry or run settings are invalid."""


class ResourceError(MemoryError):
    """Raised when the cache line storage cannot be allocated."""


class TraceParseError(ValueError):
    """Raised by the line parser for a line that is not a valid trace record."""


class TraceParseWarning(UserWarning):
    """Issued for every malformed trace line that is skipped."""
