"""Base classes for resources.

A resource is a handle to content that may live in the filesystem, inside
an archive, behind a URL, on the import path or in memory. Handles are
cheap: they are created eagerly and only touch the underlying content when
asked (existence checks, streams, sizes, timestamps).
"""

import logging
import os
from abc import ABC
from abc import abstractmethod
from pathlib import Path
from typing import BinaryIO

from ..exceptions import NotFoundError
from ..exceptions import NotResolvableError

logger = logging.getLogger(__name__)

_DRAIN_CHUNK_SIZE = 8192


def file_last_modified(path: Path) -> int:
    """Modification time of a file in milliseconds, 0 when it cannot be read."""
    try:
        return int(os.stat(path).st_mtime * 1000)
    except (OSError, ValueError):
        return 0


def file_length(path: Path) -> int:
    """Size of a file in bytes, 0 when it cannot be read."""
    try:
        return os.stat(path).st_size
    except (OSError, ValueError):
        return 0


def is_readable_file(path: str | os.PathLike) -> bool:
    """Check that a path is a readable file, answering False for unusable paths."""
    try:
        return os.access(path, os.R_OK) and not os.path.isdir(path)
    except (OSError, ValueError):
        # Embedded NUL bytes and the like
        return False


def is_writable_file(path: str | os.PathLike) -> bool:
    """Check that a path is a writable file, answering False for unusable paths."""
    try:
        return os.access(path, os.W_OK) and not os.path.isdir(path)
    except (OSError, ValueError):
        return False


class Resource(ABC):
    """Abstract handle to readable content.

    Subclasses implement :meth:`get_description` and :meth:`get_input_stream`
    and override whatever else their backing store can answer directly.
    Advisory checks (``exists``, ``is_readable``, ...) never raise; content
    operations raise :class:`~resource_kit.exceptions.NotFoundError` and
    friends.
    """

    @abstractmethod
    def get_description(self) -> str:
        """Human-readable description, used in error messages and equality."""

    @abstractmethod
    def get_input_stream(self) -> BinaryIO:
        """Open a new binary stream on the content; the caller closes it."""

    def exists(self) -> bool:
        """Check whether the content physically exists."""
        # Can we find the file in the file system?
        if self.is_file():
            try:
                return self.get_file().exists()
            except OSError as e:
                logger.debug(f"Could not retrieve file for existence check of {self.get_description()}: {e}")

        # Can we open the stream?
        from ..connection import IO_ERRORS

        try:
            self.get_input_stream().close()
            return True
        except IO_ERRORS as e:
            logger.debug(f"Could not retrieve input stream for existence check of {self.get_description()}: {e}")
            return False

    def is_readable(self) -> bool:
        return self.exists()

    def is_open(self) -> bool:
        """Whether this resource wraps an already open stream (single use)."""
        return False

    def is_file(self) -> bool:
        return False

    def get_url(self) -> str:
        raise NotResolvableError(f"{self.get_description()} cannot be resolved to URL")

    def get_uri(self) -> str:
        from ..locations import to_uri

        return to_uri(self.get_url())

    def get_file(self) -> Path:
        raise NotResolvableError(f"{self.get_description()} cannot be resolved to absolute file path")

    def readable_channel(self) -> BinaryIO:
        return self.get_input_stream()

    def get_content_as_bytes(self) -> bytes:
        with self.get_input_stream() as stream:
            return stream.read()

    def get_content_as_string(self, encoding: str = "utf-8") -> str:
        return self.get_content_as_bytes().decode(encoding)

    def content_length(self) -> int:
        """Content size in bytes; the default reads the whole stream."""
        size = 0
        with self.get_input_stream() as stream:
            while chunk := stream.read(_DRAIN_CHUNK_SIZE):
                size += len(chunk)
        return size

    def last_modified(self) -> int:
        """Last-modified timestamp in milliseconds since the epoch.

        Raises:
            NotFoundError: The timestamp is 0 and the file does not exist
        """
        file_to_check = self.get_file_for_last_modified_check()
        last_modified = file_last_modified(file_to_check)
        if last_modified == 0 and not file_to_check.exists():
            raise NotFoundError(
                f"{self.get_description()} cannot be resolved in the file system "
                "for checking its last-modified timestamp"
            )
        return last_modified

    def get_file_for_last_modified_check(self) -> Path:
        return self.get_file()

    def create_relative(self, relative_path: str) -> "Resource":
        """Create a resource relative to this one.

        Raises:
            NotFoundError: This kind of resource has no notion of relatives
        """
        raise NotFoundError(f"Cannot create a relative resource for {self.get_description()}")

    def get_filename(self) -> str | None:
        return None

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Resource):
            return NotImplemented
        return self.get_description() == other.get_description()

    def __hash__(self) -> int:
        return hash(self.get_description())

    def __str__(self) -> str:
        return self.get_description()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_description()!r})"


class WritableResource(Resource):
    """A resource whose content can also be written."""

    def is_writable(self) -> bool:
        return True

    @abstractmethod
    def get_output_stream(self) -> BinaryIO:
        """Open a new binary stream for writing; the caller closes it."""

    def writable_channel(self) -> BinaryIO:
        return self.get_output_stream()


class ContextResource(Resource):
    """A resource loaded from an enclosing context (such as a loader)."""

    @abstractmethod
    def get_path_within_context(self) -> str:
        """The path relative to the enclosing context."""
