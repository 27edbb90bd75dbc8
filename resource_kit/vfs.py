"""Bridge to a pluggable virtual filesystem.

The package does not ship a VFS implementation. An application that mounts
one installs a root lookup with :func:`install_vfs`; ``vfs:``, ``vfsfile:``
and ``vfszip:`` URLs are then resolved through it.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO
from typing import Protocol
from typing import runtime_checkable

from .exceptions import NotFoundError

logger = logging.getLogger(__name__)


@runtime_checkable
class VirtualFile(Protocol):
    """Opaque handle to a file inside a virtual filesystem."""

    def exists(self) -> bool: ...

    def get_size(self) -> int: ...

    def get_last_modified(self) -> int:
        """Modification time in milliseconds since the epoch."""
        ...

    def open_stream(self) -> BinaryIO: ...

    def to_url(self) -> str: ...

    def to_uri(self) -> str: ...

    def get_name(self) -> str: ...

    def get_path_name(self) -> str: ...

    def get_physical_file(self) -> Path: ...

    def get_child(self, path: str) -> "VirtualFile": ...


VfsRootLookup = Callable[[str], VirtualFile]

_root_lookup: VfsRootLookup | None = None


def install_vfs(lookup: VfsRootLookup) -> None:
    """Install the function that maps a URL/URI to its virtual file."""
    global _root_lookup
    _root_lookup = lookup
    logger.debug("Installed VFS root lookup")


def uninstall_vfs() -> None:
    """Remove any installed VFS root lookup."""
    global _root_lookup
    _root_lookup = None


def is_vfs_installed() -> bool:
    return _root_lookup is not None


def get_root(url: str) -> VirtualFile:
    """Look up the virtual file for a URL or URI.

    Raises:
        NotFoundError: No VFS is installed
    """
    if _root_lookup is None:
        raise NotFoundError(f"No virtual filesystem available to resolve {url}")
    return _root_lookup(url)


def exists(vfs_resource: VirtualFile) -> bool:
    try:
        return vfs_resource.exists()
    except OSError as e:
        logger.debug(f"Existence check of VFS resource failed: {e}")
        return False


def is_readable(vfs_resource: VirtualFile) -> bool:
    try:
        return vfs_resource.exists() and vfs_resource.get_size() > 0
    except OSError as e:
        logger.debug(f"Readability check of VFS resource failed: {e}")
        return False


def get_relative(url: str) -> VirtualFile:
    return get_root(url)
