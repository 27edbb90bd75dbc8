"""Resources inside a virtual filesystem."""

from pathlib import Path
from typing import BinaryIO

from .. import vfs
from ..exceptions import NotResolvableError
from ..locations import to_relative_url
from ..vfs import VirtualFile
from .base import Resource


class VfsResource(Resource):
    """Resource forwarding every call to a :class:`~resource_kit.vfs.VirtualFile`."""

    def __init__(self, resource: VirtualFile):
        if resource is None:
            raise ValueError("VirtualFile must not be None")
        self._resource = resource

    @property
    def virtual_file(self) -> VirtualFile:
        return self._resource

    def get_input_stream(self) -> BinaryIO:
        return self._resource.open_stream()

    def exists(self) -> bool:
        return vfs.exists(self._resource)

    def is_readable(self) -> bool:
        return vfs.is_readable(self._resource)

    def is_file(self) -> bool:
        try:
            return self._resource.get_physical_file().exists()
        except OSError:
            return False

    def get_url(self) -> str:
        try:
            return self._resource.to_url()
        except OSError as e:
            raise NotResolvableError(f"Failed to obtain URL for file {self._resource}") from e

    def get_uri(self) -> str:
        try:
            return self._resource.to_uri()
        except OSError as e:
            raise NotResolvableError(f"Failed to obtain URI for {self._resource}") from e

    def get_file(self) -> Path:
        return self._resource.get_physical_file()

    def content_length(self) -> int:
        return self._resource.get_size()

    def last_modified(self) -> int:
        return self._resource.get_last_modified()

    def create_relative(self, relative_path: str) -> "VfsResource":
        if not relative_path.startswith(".") and "/" in relative_path:
            try:
                return VfsResource(self._resource.get_child(relative_path))
            except OSError:
                # Fall back to a lookup of the relative URL
                pass
        return VfsResource(vfs.get_relative(to_relative_url(self.get_url(), relative_path)))

    def get_filename(self) -> str:
        return self._resource.get_name()

    def get_description(self) -> str:
        return f"VFS resource [{self._resource.get_path_name()}]"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, VfsResource):
            return NotImplemented
        return self._resource == other._resource

    def __hash__(self) -> int:
        return hash(self._resource)
