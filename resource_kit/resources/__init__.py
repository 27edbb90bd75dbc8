"""Resource handles for files, archives, URLs, the import path and memory."""

from .base import ContextResource
from .base import Resource
from .base import WritableResource
from .byte_array import ByteArrayResource
from .classpath import ClassLoader
from .classpath import ClassPathResource
from .classpath import SysPathClassLoader
from .classpath import get_default_class_loader
from .descriptive import DescriptiveResource
from .file_resolving import FileResolvingResource
from .filesystem import FileSystemResource
from .input_stream import InputStreamResource
from .module import ModuleResource
from .path import PathResource
from .url import FileUrlResource
from .url import UrlResource
from .vfs import VfsResource

__all__ = [
    "Resource",
    "WritableResource",
    "ContextResource",
    "FileResolvingResource",
    "ByteArrayResource",
    "InputStreamResource",
    "ClassLoader",
    "SysPathClassLoader",
    "get_default_class_loader",
    "ClassPathResource",
    "FileSystemResource",
    "PathResource",
    "UrlResource",
    "FileUrlResource",
    "ModuleResource",
    "VfsResource",
    "DescriptiveResource",
]
