"""Exception types raised by resource resolution.

Boolean checks such as ``exists()`` never raise these; content-bearing
operations (opening streams, sizes, timestamps, projections) do.
"""


class ResourceError(Exception):
    """Base class for all resource resolution errors."""


class NotFoundError(ResourceError, FileNotFoundError):
    """Raised when the content behind a resource is absent."""


class NotResolvableError(NotFoundError):
    """Raised when a resource cannot be projected to a URL, URI or file."""


class AlreadyConsumedError(ResourceError, RuntimeError):
    """Raised when a single-use stream resource is read a second time."""


class MalformedLocationError(ResourceError, ValueError):
    """Raised when a location string cannot be parsed into a URI/URL."""

    def __init__(self, location: str, message: str | None = None):
        self.location = location
        super().__init__(message or f"Malformed location: {location}")
