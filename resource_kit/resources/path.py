"""Resources backed by pathlib paths."""

import os
from pathlib import Path
from typing import BinaryIO

from ..exceptions import NotFoundError
from ..locations import FILE_URL_PREFIX
from ..locations import get_file
from ..locations import path_to_url
from .base import WritableResource
from .base import is_readable_file
from .base import is_writable_file
from .filesystem import open_file


class PathResource(WritableResource):
    """Resource for a normalized :class:`pathlib.Path`.

    Accepts a Path, a path string, or a ``file:`` URI. Unlike
    :class:`FileSystemResource`, relative resources always resolve inside
    this path (``path / relative``).
    """

    def __init__(self, path: str | os.PathLike):
        if path is None:
            raise ValueError("Path must not be None")
        if isinstance(path, str) and path.startswith(FILE_URL_PREFIX):
            path = get_file(path)
        self._path = Path(os.path.normpath(path))

    @property
    def path(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.exists()

    def is_readable(self) -> bool:
        return is_readable_file(self._path)

    def is_writable(self) -> bool:
        return is_writable_file(self._path)

    def is_file(self) -> bool:
        return True

    def get_file(self) -> Path:
        return self._path

    def get_input_stream(self) -> BinaryIO:
        if not self.exists():
            raise NotFoundError(f"{self.path} (no such file or directory)")
        if self._path.is_dir():
            raise NotFoundError(f"{self.path} (is a directory)")
        return open_file(self._path)

    def get_output_stream(self) -> BinaryIO:
        if self._path.is_dir():
            raise NotFoundError(f"{self.path} (is a directory)")
        return open_file(self._path, "wb")

    def readable_channel(self) -> BinaryIO:
        return open_file(self._path, "rb", buffering=0)

    def writable_channel(self) -> BinaryIO:
        return open_file(self._path, "r+b", buffering=0)

    def get_content_as_bytes(self) -> bytes:
        with open_file(self._path) as f:
            return f.read()

    def get_content_as_string(self, encoding: str = "utf-8") -> str:
        return self.get_content_as_bytes().decode(encoding)

    def get_url(self) -> str:
        return path_to_url(self._path)

    def get_uri(self) -> str:
        return path_to_url(self._path)

    def content_length(self) -> int:
        try:
            return self._path.stat().st_size
        except FileNotFoundError as e:
            raise NotFoundError(f"{self.path} (no such file or directory)") from e

    def last_modified(self) -> int:
        try:
            return int(self._path.stat().st_mtime * 1000)
        except FileNotFoundError as e:
            raise NotFoundError(f"{self.path} (no such file or directory)") from e

    def create_relative(self, relative_path: str) -> "PathResource":
        return PathResource(self._path / relative_path)

    def get_filename(self) -> str:
        return self._path.name

    def get_description(self) -> str:
        return f"path [{self._path.absolute()}]"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"PathResource({self._path})"
