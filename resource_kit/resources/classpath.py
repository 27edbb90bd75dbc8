"""Resources on the import path ("class path").

A class loader maps slash-separated resource names to URLs. The default
one searches ``sys.path``: directories directly, ZIP archives (eggs,
zipapps, wheels) by entry name.
"""

import inspect
import logging
import os
import sys
import zipfile
from pathlib import Path
from typing import Any
from typing import BinaryIO
from typing import Protocol
from typing import runtime_checkable
from urllib.parse import quote

from ..connection import IO_ERRORS
from ..connection import open_connection
from ..exceptions import NotFoundError
from ..locations import JAR_URL_PREFIX
from ..locations import JAR_URL_SEPARATOR
from ..locations import path_to_url
from ..paths import apply_relative_path
from ..paths import class_package_as_resource_path
from ..paths import clean_path
from ..paths import get_filename
from .file_resolving import FileResolvingResource

logger = logging.getLogger(__name__)


@runtime_checkable
class ClassLoader(Protocol):
    """Finds resources by slash-separated name."""

    def get_resource(self, name: str) -> str | None:
        """URL of the named resource, or None if it cannot be found."""
        ...

    def get_resource_as_stream(self, name: str) -> BinaryIO | None:
        """Open stream on the named resource, or None if it cannot be found."""
        ...


class SysPathClassLoader:
    """Class loader over a list of search path entries.

    Args:
        search_path: Directories and ZIP archives to search in order.
                     If None, the live ``sys.path`` is used.
    """

    def __init__(self, search_path: list[str | os.PathLike] | None = None):
        self._search_path = [os.fspath(entry) for entry in search_path] if search_path is not None else None

    @property
    def search_path(self) -> list[str]:
        return list(self._search_path) if self._search_path is not None else list(sys.path)

    def get_resource(self, name: str) -> str | None:
        for entry in self.search_path:
            root = Path(entry or os.curdir)
            if root.is_dir():
                candidate = root / name
                if candidate.exists():
                    return path_to_url(candidate)
            elif zipfile.is_zipfile(root):
                if self._archive_contains(root, name):
                    return f"{JAR_URL_PREFIX}{path_to_url(root)}{JAR_URL_SEPARATOR}{quote(name)}"
        return None

    @staticmethod
    def _archive_contains(archive_path: Path, name: str) -> bool:
        try:
            with zipfile.ZipFile(archive_path) as archive:
                names = set(archive.namelist())
        except (OSError, zipfile.BadZipFile) as e:
            logger.debug(f"Skipping unreadable archive {archive_path}: {e}")
            return False
        return name in names or name.rstrip("/") + "/" in names

    def get_resource_as_stream(self, name: str) -> BinaryIO | None:
        url = self.get_resource(name)
        if url is None:
            return None
        try:
            return open_connection(url).get_input_stream()
        except IO_ERRORS as e:
            logger.debug(f"Could not open {url}: {e}")
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SysPathClassLoader):
            return NotImplemented
        return self._search_path == other._search_path

    def __hash__(self) -> int:
        return hash(tuple(self._search_path) if self._search_path is not None else None)

    def __repr__(self) -> str:
        return f"SysPathClassLoader({self._search_path!r})"


_default_class_loader: SysPathClassLoader | None = None


def get_default_class_loader() -> SysPathClassLoader:
    """Get the class loader searching the live ``sys.path``."""
    global _default_class_loader
    if _default_class_loader is None:
        _default_class_loader = SysPathClassLoader()
    return _default_class_loader


def get_owner_class_loader(owner: Any) -> ClassLoader:
    """Class loader rooted at the search path entry an owner was imported from.

    Falls back to the default loader for owners without a source file
    (built-ins, namespace packages).
    """
    module = owner if inspect.ismodule(owner) else sys.modules.get(getattr(owner, "__module__", ""), None)
    module_file = getattr(module, "__file__", None)
    if module is None or not module_file:
        return get_default_class_loader()

    root = Path(module_file).resolve().parent
    package = class_package_as_resource_path(module)
    depth = len(package.split("/")) if package else 0
    # A package's __init__ lives inside its own directory
    for _ in range(depth):
        root = root.parent
    return SysPathClassLoader([root])


class ClassPathResource(FileResolvingResource):
    """Resource found through a class loader.

    With an ``owner`` (a class or module) relative paths resolve against the
    owner's package and a leading ``/`` makes them absolute. With a class
    loader the leading ``/`` is simply dropped.

    Args:
        path: Resource path, cleaned on construction
        class_loader: Loader to search; None uses the default loader.
                      A class or module passed here is taken as the owner.
        owner: Class or module whose package relative paths start from
    """

    def __init__(self, path: str, class_loader: ClassLoader | Any | None = None, *, owner: Any = None):
        if path is None:
            raise ValueError("Path must not be None")
        if owner is None and (inspect.isclass(class_loader) or inspect.ismodule(class_loader)):
            owner, class_loader = class_loader, None

        path_to_use = clean_path(path)
        if owner is not None:
            self._path = path_to_use
            if not path_to_use.startswith("/"):
                package = class_package_as_resource_path(owner)
                absolute_path = f"{package}/{path_to_use}" if package else path_to_use
            else:
                absolute_path = path_to_use[1:]
            self._class_loader = None
        else:
            if path_to_use.startswith("/"):
                path_to_use = path_to_use[1:]
            self._path = path_to_use
            absolute_path = path_to_use
            self._class_loader = class_loader if class_loader is not None else get_default_class_loader()

        self._absolute_path = absolute_path
        self._owner = owner

    @property
    def path(self) -> str:
        """Absolute path within the class path (no leading slash)."""
        return self._absolute_path

    @property
    def class_loader(self) -> ClassLoader:
        if self._owner is not None:
            return get_owner_class_loader(self._owner)
        return self._class_loader

    def resolve_url(self) -> str | None:
        return self.class_loader.get_resource(self._absolute_path)

    def exists(self) -> bool:
        return self.resolve_url() is not None

    def is_readable(self) -> bool:
        url = self.resolve_url()
        return url is not None and self.check_readable(url)

    def get_input_stream(self) -> BinaryIO:
        stream = self.class_loader.get_resource_as_stream(self._absolute_path)
        if stream is None:
            raise NotFoundError(f"{self.get_description()} cannot be opened because it does not exist")
        return stream

    def get_url(self) -> str:
        url = self.resolve_url()
        if url is None:
            raise NotFoundError(f"{self.get_description()} cannot be resolved to URL because it does not exist")
        return url

    def create_relative(self, relative_path: str) -> "ClassPathResource":
        path_to_use = apply_relative_path(self._path, relative_path)
        if self._owner is not None:
            return ClassPathResource(path_to_use, owner=self._owner)
        return ClassPathResource(path_to_use, self._class_loader)

    def get_filename(self) -> str | None:
        return get_filename(self._absolute_path)

    def get_description(self) -> str:
        return f"class path resource [{self._absolute_path}]"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._absolute_path == other._absolute_path and self.class_loader == other.class_loader

    def __hash__(self) -> int:
        return hash(self._absolute_path)
