"""Resource loaders: turn location strings into resources.

Resolution order for :meth:`DefaultResourceLoader.get_resource`:

1. Registered protocol resolvers, in registration order
2. ``/absolute/path`` through :meth:`DefaultResourceLoader.get_resource_by_path`
3. ``classpath:some/path`` as a :class:`ClassPathResource`
4. URLs: file-family URLs as :class:`FileUrlResource`, others as
   :class:`UrlResource`
5. Anything else through ``get_resource_by_path``
"""

import logging
import threading
from typing import Any
from typing import Protocol
from typing import TypeVar
from typing import runtime_checkable

from .exceptions import MalformedLocationError
from .locations import CLASSPATH_URL_PREFIX
from .locations import is_file_url
from .locations import to_url
from .paths import apply_relative_path
from .resources.base import ContextResource
from .resources.base import Resource
from .resources.classpath import ClassLoader
from .resources.classpath import ClassPathResource
from .resources.classpath import get_default_class_loader
from .resources.filesystem import FileSystemResource
from .resources.url import FileUrlResource
from .resources.url import UrlResource

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class ResourceLoader(Protocol):
    """Anything that can load resources by location."""

    def get_resource(self, location: str) -> Resource: ...

    @property
    def class_loader(self) -> ClassLoader: ...


@runtime_checkable
class ProtocolResolver(Protocol):
    """Resolves custom location syntaxes before the loader's own rules."""

    def resolve(self, location: str, resource_loader: ResourceLoader) -> Resource | None:
        """Return a resource for the location, or None to pass it on."""
        ...


class ClassPathContextResource(ClassPathResource, ContextResource):
    """Class path resource that knows its path within the loader."""

    def get_path_within_context(self) -> str:
        return self.path

    def create_relative(self, relative_path: str) -> "ClassPathContextResource":
        return ClassPathContextResource(apply_relative_path(self.path, relative_path), self.class_loader)


class FileSystemContextResource(FileSystemResource, ContextResource):
    """Filesystem resource that knows its path within the loader."""

    def get_path_within_context(self) -> str:
        return self.path


class DefaultResourceLoader:
    """Resource loader with protocol resolvers and per-type resource caches.

    Example:
        >>> loader = DefaultResourceLoader()  # doctest: +SKIP
        >>> loader.get_resource("classpath:resource_kit/py.typed")  # doctest: +SKIP
        ClassPathResource('class path resource [resource_kit/py.typed]')
    """

    def __init__(self, class_loader: ClassLoader | None = None):
        self._class_loader = class_loader
        self._lock = threading.Lock()
        # Dict keys as an insertion-ordered set
        self._protocol_resolvers: dict[ProtocolResolver, None] = {}
        self._resource_caches: dict[type, dict[Resource, Any]] = {}

    @property
    def class_loader(self) -> ClassLoader:
        return self._class_loader if self._class_loader is not None else get_default_class_loader()

    @class_loader.setter
    def class_loader(self, class_loader: ClassLoader | None) -> None:
        self._class_loader = class_loader

    def add_protocol_resolver(self, resolver: ProtocolResolver) -> None:
        """Register a resolver; it is consulted after those added before it."""
        if resolver is None:
            raise ValueError("ProtocolResolver must not be None")
        with self._lock:
            self._protocol_resolvers[resolver] = None
        logger.debug(f"Added protocol resolver {resolver!r}")

    def get_protocol_resolvers(self) -> list[ProtocolResolver]:
        """Snapshot of the registered resolvers in registration order."""
        with self._lock:
            return list(self._protocol_resolvers)

    def get_resource_cache(self, value_type: type[T]) -> dict[Resource, T]:
        """Cache of values of one type keyed by resource, created on first use."""
        with self._lock:
            return self._resource_caches.setdefault(value_type, {})

    def clear_resource_caches(self) -> None:
        with self._lock:
            self._resource_caches.clear()

    def get_resource(self, location: str) -> Resource:
        """Get a resource handle for a location.

        The handle is always returned, whether or not the content exists.

        Args:
            location: ``classpath:`` pseudo URL, URL, or path

        Raises:
            ValueError: location is None
        """
        if location is None:
            raise ValueError("Location must not be None")

        for resolver in self.get_protocol_resolvers():
            resource = resolver.resolve(location, self)
            if resource is not None:
                return resource

        if location.startswith("/"):
            return self.get_resource_by_path(location)
        if location.startswith(CLASSPATH_URL_PREFIX):
            return ClassPathResource(location[len(CLASSPATH_URL_PREFIX) :], self.class_loader)

        try:
            url = to_url(location)
        except MalformedLocationError:
            # No URL: resolve as resource path
            return self.get_resource_by_path(location)
        if is_file_url(url):
            return FileUrlResource(url)
        return UrlResource(url)

    def get_resource_by_path(self, path: str) -> Resource:
        return ClassPathContextResource(path, self.class_loader)


class FileSystemResourceLoader(DefaultResourceLoader):
    """Loader resolving plain paths as filesystem paths.

    Paths are taken relative to the working directory, even with a leading
    slash. Use ``file:`` URLs for absolute filesystem paths.
    """

    def get_resource_by_path(self, path: str) -> Resource:
        if path and path.startswith("/"):
            path = path[1:]
        return FileSystemContextResource(path)
