"""Uniform handles to content in files, archives, URLs, packages and memory.

Typical use goes through a loader:

    from resource_kit import DefaultResourceLoader

    loader = DefaultResourceLoader()
    resource = loader.get_resource("classpath:my_app/defaults.yaml")
    if resource.is_readable():
        text = resource.get_content_as_string()
"""

from .exceptions import AlreadyConsumedError
from .exceptions import MalformedLocationError
from .exceptions import NotFoundError
from .exceptions import NotResolvableError
from .exceptions import ResourceError
from .loader import ClassPathContextResource
from .loader import DefaultResourceLoader
from .loader import FileSystemContextResource
from .loader import FileSystemResourceLoader
from .loader import ProtocolResolver
from .loader import ResourceLoader
from .paths import clean_path
from .resources import ByteArrayResource
from .resources import ClassPathResource
from .resources import ContextResource
from .resources import DescriptiveResource
from .resources import FileSystemResource
from .resources import FileUrlResource
from .resources import InputStreamResource
from .resources import ModuleResource
from .resources import PathResource
from .resources import Resource
from .resources import UrlResource
from .resources import VfsResource
from .resources import WritableResource

__all__ = [
    "ResourceError",
    "NotFoundError",
    "NotResolvableError",
    "AlreadyConsumedError",
    "MalformedLocationError",
    "ResourceLoader",
    "ProtocolResolver",
    "DefaultResourceLoader",
    "FileSystemResourceLoader",
    "ClassPathContextResource",
    "FileSystemContextResource",
    "clean_path",
    "Resource",
    "WritableResource",
    "ContextResource",
    "ByteArrayResource",
    "InputStreamResource",
    "ClassPathResource",
    "FileSystemResource",
    "PathResource",
    "UrlResource",
    "FileUrlResource",
    "ModuleResource",
    "VfsResource",
    "DescriptiveResource",
]
