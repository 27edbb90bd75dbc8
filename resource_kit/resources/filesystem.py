"""Resources backed by plain filesystem paths."""

import logging
import os
from pathlib import Path
from typing import BinaryIO

from ..exceptions import NotFoundError
from ..locations import path_to_url
from ..paths import apply_relative_path
from ..paths import clean_path
from .base import WritableResource
from .base import file_length
from .base import is_readable_file
from .base import is_writable_file

logger = logging.getLogger(__name__)


def open_file(path: str | os.PathLike, mode: str = "rb", buffering: int = -1) -> BinaryIO:
    """Open a file, reporting missing files and directories as NotFoundError."""
    try:
        return open(path, mode, buffering=buffering)
    except FileNotFoundError as e:
        raise NotFoundError(f"{path} (No such file or directory)") from e
    except IsADirectoryError as e:
        raise NotFoundError(f"{path} (Is a directory)") from e


class FileSystemResource(WritableResource):
    """Resource for a file or directory given as a path string.

    Relative paths are kept as given and resolved against the working
    directory on access. ``create_relative`` is string based: relative to
    ``/data/dir/`` (trailing slash) it resolves inside the directory,
    relative to ``/data/dir`` it resolves next to it.

    Example:
        >>> res = FileSystemResource("/etc/app/config.yaml")  # doctest: +SKIP
        >>> res.create_relative("secrets.yaml").get_description()  # doctest: +SKIP
        'file [/etc/app/secrets.yaml]'
    """

    def __init__(self, path: str | os.PathLike):
        if path is None:
            raise ValueError("Path must not be None")
        self._file = os.fspath(path)
        self._path = clean_path(self._file)

    @property
    def path(self) -> str:
        """The cleaned path string."""
        return self._path

    def exists(self) -> bool:
        return os.path.exists(self._file)

    def is_readable(self) -> bool:
        return is_readable_file(self._file)

    def is_writable(self) -> bool:
        return is_writable_file(self._file)

    def is_file(self) -> bool:
        return True

    def get_file(self) -> Path:
        return Path(self._file)

    def get_input_stream(self) -> BinaryIO:
        return open_file(self._file)

    def get_output_stream(self) -> BinaryIO:
        return open_file(self._file, "wb")

    def readable_channel(self) -> BinaryIO:
        return open_file(self._file, "rb", buffering=0)

    def writable_channel(self) -> BinaryIO:
        return open_file(self._file, "r+b", buffering=0)

    def get_content_as_bytes(self) -> bytes:
        with open_file(self._file) as f:
            return f.read()

    def get_content_as_string(self, encoding: str = "utf-8") -> str:
        return self.get_content_as_bytes().decode(encoding)

    def get_url(self) -> str:
        return path_to_url(self._file)

    def get_uri(self) -> str:
        return path_to_url(self._file)

    def content_length(self) -> int:
        length = file_length(Path(self._file))
        if length == 0 and not os.path.exists(self._file):
            raise NotFoundError(
                f"{self.get_description()} cannot be resolved in the file system for checking its content length"
            )
        return length

    def create_relative(self, relative_path: str) -> "FileSystemResource":
        return FileSystemResource(apply_relative_path(self._path, relative_path))

    def get_filename(self) -> str:
        return os.path.basename(os.path.normpath(self._file)) if self._file else ""

    def get_description(self) -> str:
        return f"file [{os.path.abspath(self._file)}]"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"FileSystemResource({self._file})"
