"""Location and URL classification helpers.

URLs and URIs are plain strings throughout the package. A "URL" is the raw
location as handed over by the caller; a "URI" is the same location with
literal spaces escaped and its syntax validated.

Archive URLs address entries inside JAR/WAR/ZIP containers:

- ``jar:file:/libs/app.jar!/META-INF/app.properties``
- ``war:file:/apps/app.war*/WEB-INF/lib/x.jar!/y.txt`` (Tomcat nesting)
"""

import io
import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import quote
from urllib.parse import unquote

from .exceptions import MalformedLocationError
from .exceptions import NotFoundError
from .paths import apply_relative_path
from .paths import clean_path

if TYPE_CHECKING:
    from .resources.base import Resource

logger = logging.getLogger(__name__)

CLASSPATH_URL_PREFIX = "classpath:"
FILE_URL_PREFIX = "file:"
JAR_URL_PREFIX = "jar:"
WAR_URL_PREFIX = "war:"

URL_PROTOCOL_FILE = "file"
URL_PROTOCOL_HTTP = "http"
URL_PROTOCOL_HTTPS = "https"
URL_PROTOCOL_JAR = "jar"
URL_PROTOCOL_WAR = "war"
URL_PROTOCOL_ZIP = "zip"
URL_PROTOCOL_WSJAR = "wsjar"
URL_PROTOCOL_VFSZIP = "vfszip"
URL_PROTOCOL_VFSFILE = "vfsfile"
URL_PROTOCOL_VFS = "vfs"

JAR_FILE_EXTENSION = ".jar"
JAR_URL_SEPARATOR = "!/"
WAR_URL_SEPARATOR = "*/"

FILE_PROTOCOLS = frozenset({URL_PROTOCOL_FILE, URL_PROTOCOL_VFSFILE, URL_PROTOCOL_VFS})
JAR_PROTOCOLS = frozenset(
    {URL_PROTOCOL_JAR, URL_PROTOCOL_WAR, URL_PROTOCOL_ZIP, URL_PROTOCOL_VFSZIP, URL_PROTOCOL_WSJAR}
)
HTTP_PROTOCOLS = frozenset({URL_PROTOCOL_HTTP, URL_PROTOCOL_HTTPS})

# Protocols a connection can be opened for
KNOWN_PROTOCOLS = FILE_PROTOCOLS | JAR_PROTOCOLS | HTTP_PROTOCOLS

_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")
_URI_ILLEGAL_CHARS = frozenset('"<>\\^`{|}') | frozenset(chr(c) for c in range(0x21))

# Characters kept verbatim when quoting a path into a URI
_URI_PATH_SAFE = "/:@!$&'()*+,;=-._~"


def get_protocol(url: str) -> str:
    """Return the lower-cased protocol (scheme) of a URL.

    Raises:
        MalformedLocationError: The URL has no protocol
    """
    match = _SCHEME_PATTERN.match(url)
    if match is None:
        raise MalformedLocationError(url, f"no protocol: {url}")
    return match.group(1).lower()


def _split_scheme(url: str) -> tuple[str, str]:
    """Split a URL into (protocol, scheme-specific part including fragment)."""
    protocol = get_protocol(url)
    return protocol, url[len(protocol) + 1 :]


def get_url_file(url: str) -> str:
    """Return the file part (path plus query) of a URL.

    For archive URLs this is everything after the protocol, e.g.
    ``file:/a.jar!/x.txt`` for ``jar:file:/a.jar!/x.txt``. The authority of
    hierarchical URLs (``//host:port``) is not part of the file.
    """
    _protocol, rest = _split_scheme(url)
    rest = rest.partition("#")[0]
    if rest.startswith("//"):
        authority_end = len(rest)
        for delimiter in ("/", "?"):
            index = rest.find(delimiter, 2)
            if index != -1:
                authority_end = min(authority_end, index)
        rest = rest[authority_end:]
    return rest


def get_url_path(url: str) -> str:
    """Return the raw (still escaped) path of a URL, without query."""
    return get_url_file(url).partition("?")[0]


def get_user_info(url: str) -> str | None:
    """Return the raw ``user:password`` part of a URL authority, if any."""
    _protocol, rest = _split_scheme(url)
    if not rest.startswith("//"):
        return None
    authority = re.split(r"[/?#]", rest[2:], maxsplit=1)[0]
    user_info, separator, _host = authority.rpartition("@")
    return user_info if separator else None


def get_uri_path(uri: str) -> str | None:
    """Return the decoded path of a hierarchical URI.

    Opaque URIs (whose scheme-specific part does not start with ``/``, such
    as ``file:test.txt``) have no path and yield None.
    """
    try:
        _protocol, rest = _split_scheme(uri)
    except MalformedLocationError:
        rest = uri
    if not rest.startswith("/"):
        return None
    return unquote(get_url_path(uri) if _SCHEME_PATTERN.match(uri) else rest.partition("?")[0])


def is_url(location: str | None) -> bool:
    """Check whether a location is a URL or a ``classpath:`` pseudo URL."""
    if location is None:
        return False
    if location.startswith(CLASSPATH_URL_PREFIX):
        return True
    try:
        to_url(location)
        return True
    except MalformedLocationError:
        return False


def is_file_url(url: str) -> bool:
    """Check whether a URL points into the file system (file, vfsfile, vfs)."""
    try:
        return get_protocol(url) in FILE_PROTOCOLS
    except MalformedLocationError:
        return False


def is_jar_url(url: str) -> bool:
    """Check whether a URL points into an archive (jar, war, zip, vfszip, wsjar)."""
    try:
        return get_protocol(url) in JAR_PROTOCOLS
    except MalformedLocationError:
        return False


def is_jar_file_url(url: str) -> bool:
    """Check whether a URL is a ``file:`` URL of a ``.jar`` file."""
    try:
        protocol = get_protocol(url)
    except MalformedLocationError:
        return False
    return protocol == URL_PROTOCOL_FILE and get_url_path(url).lower().endswith(JAR_FILE_EXTENSION)


def extract_jar_file_url(jar_url: str) -> str:
    """Extract the URL of the archive file from a JAR entry URL.

    ``jar:file:/libs/app.jar!/a.txt`` gives ``file:/libs/app.jar``. A URL
    without the ``!/`` separator is returned unchanged.

    Raises:
        MalformedLocationError: The archive part cannot be turned into a URL
    """
    url_file = get_url_file(jar_url)
    separator_index = url_file.find(JAR_URL_SEPARATOR)
    if separator_index == -1:
        return jar_url

    jar_file = url_file[:separator_index]
    try:
        return to_url(jar_file)
    except MalformedLocationError:
        # No protocol, e.g. "jar:C:/libs/app.jar!/": a plain file path
        if not jar_file.startswith("/"):
            jar_file = "/" + jar_file
        return to_url(FILE_URL_PREFIX + jar_file)


def extract_archive_url(jar_url: str) -> str:
    """Extract the URL of the outermost archive from a JAR/WAR entry URL.

    Handles Tomcat's ``war:file:/app.war*/WEB-INF/lib/x.jar!/y.txt`` form,
    returning ``file:/app.war``: only the outermost archive is guaranteed to
    be resolvable in the file system.

    Raises:
        MalformedLocationError: The archive part cannot be turned into a URL
    """
    url_file = get_url_file(jar_url)
    end_index = url_file.find(WAR_URL_SEPARATOR)
    if end_index != -1:
        war_file = url_file[:end_index]
        if get_protocol(jar_url) == URL_PROTOCOL_WAR:
            return to_url(war_file)
        start_index = war_file.find(WAR_URL_PREFIX)
        if start_index != -1:
            return to_url(war_file[start_index + len(WAR_URL_PREFIX) :])

    return extract_jar_file_url(jar_url)


def to_uri(location: str) -> str:
    """Turn a location into a URI string, escaping literal spaces.

    Raises:
        MalformedLocationError: The location is not valid URI syntax
    """
    escaped = location.replace(" ", "%20")
    if _BAD_ESCAPE_PATTERN.search(escaped):
        raise MalformedLocationError(location, f"Malformed escape pair in URI: {location}")
    # Fragment delimiter may appear once, everything else must be legal
    if escaped.count("#") > 1:
        raise MalformedLocationError(location, f"Illegal character in fragment: {location}")
    illegal = next((c for c in escaped if c in _URI_ILLEGAL_CHARS), None)
    if illegal is not None:
        raise MalformedLocationError(location, f"Illegal character {illegal!r} in URI: {location}")
    if escaped.startswith(":"):
        raise MalformedLocationError(location, f"Expected scheme name: {location}")
    return escaped


def to_url(location: str) -> str:
    """Turn a location into a URL string.

    Prefers the cleaned, URI-validated form of the location; falls back to
    the raw location for strings that are not valid URIs (for example with
    decoded percent characters). Either way the protocol must be known.

    Raises:
        MalformedLocationError: No protocol, unknown protocol, or bad syntax
    """
    try:
        url = to_uri(clean_path(location))
    except MalformedLocationError:
        url = location

    protocol = get_protocol(url)
    if protocol not in KNOWN_PROTOCOLS:
        raise MalformedLocationError(location, f"unknown protocol: {protocol}")
    return url


def to_relative_url(root: str, relative_path: str) -> str:
    """Create a URL relative to ``root`` (last segment replaced).

    ``#`` in the relative path is escaped so it is not taken as a fragment.
    """
    relative_path = relative_path.replace("#", "%23")
    return to_url(apply_relative_path(root, relative_path))


def path_to_url(path: str | os.PathLike) -> str:
    """Build a ``file:/...`` URL (no authority) for a filesystem path.

    Directories get a trailing slash so relative URLs resolve inside them.
    """
    absolute = Path(os.path.abspath(path))
    url_path = absolute.as_posix()
    if not url_path.startswith("/"):
        url_path = "/" + url_path
    if absolute.is_dir() and not url_path.endswith("/"):
        url_path += "/"
    return FILE_URL_PREFIX + quote(url_path, safe=_URI_PATH_SAFE)


def _decode_file_path(scheme_specific_part: str) -> Path:
    """Turn the decoded scheme-specific part of a file URL into a Path."""
    path = scheme_specific_part.partition("?")[0]
    if path.startswith("//"):
        authority, _separator, remainder = path[2:].partition("/")
        if authority in ("", "localhost"):
            path = "/" + remainder
    return Path(path)


def get_file(url: str, description: str = "URL") -> Path:
    """Resolve a ``file:`` URL (or URI) to a filesystem path.

    Args:
        url: URL or URI string
        description: Description of the resource being resolved, used in errors

    Raises:
        NotFoundError: The URL does not reside in the file system
    """
    try:
        protocol, rest = _split_scheme(url)
    except MalformedLocationError:
        protocol, rest = "", url
    if protocol != URL_PROTOCOL_FILE:
        raise NotFoundError(
            f"{description} cannot be resolved to absolute file path "
            f"because it does not reside in the file system: {url}"
        )
    try:
        # URI decoding for special characters such as spaces
        decoded = unquote(to_uri(url)[len(protocol) + 1 :].partition("#")[0])
    except MalformedLocationError:
        # Not a valid URI (should hardly ever happen): take the raw file part
        decoded = get_url_file(url)
    return _decode_file_path(decoded)


def get_url(location: str) -> str:
    """Resolve a location (``classpath:``, URL or file path) to a URL.

    Raises:
        NotFoundError: A ``classpath:`` location does not exist
    """
    if location is None:
        raise ValueError("Resource location must not be None")
    if location.startswith(CLASSPATH_URL_PREFIX):
        from .resources.classpath import get_default_class_loader

        path = location[len(CLASSPATH_URL_PREFIX) :]
        url = get_default_class_loader().get_resource(path)
        if url is None:
            raise NotFoundError(
                f"class path resource [{path}] cannot be resolved to URL because it does not exist"
            )
        return url
    try:
        return to_url(location)
    except MalformedLocationError:
        # No URL: treat as file path
        return path_to_url(location)


def get_file_from_location(location: str) -> Path:
    """Resolve a location (``classpath:``, URL or file path) to a filesystem path.

    Raises:
        NotFoundError: The location does not exist or is not in the file system
    """
    if location is None:
        raise ValueError("Resource location must not be None")
    if location.startswith(CLASSPATH_URL_PREFIX):
        from .resources.classpath import get_default_class_loader

        path = location[len(CLASSPATH_URL_PREFIX) :]
        description = f"class path resource [{path}]"
        url = get_default_class_loader().get_resource(path)
        if url is None:
            raise NotFoundError(f"{description} cannot be resolved to absolute file path because it does not exist")
        return get_file(url, description)
    try:
        return get_file(to_url(location))
    except MalformedLocationError:
        return Path(location)


def use_caches_if_necessary(con: Any) -> None:
    """Disable caching on a connection unless it is an archive connection.

    Archive connections keep caching on: switching it off leaks file handles
    on some platforms.
    """
    if not is_jar_url(con.url):
        con.use_caches = False


def get_buffered_stream(resource: "Resource") -> io.BufferedReader:
    """Open a buffered binary stream on a resource."""
    return io.BufferedReader(resource.get_input_stream())


def get_reader(resource: "Resource", encoding: str = "utf-8") -> io.TextIOWrapper:
    """Open a text reader on a resource."""
    return io.TextIOWrapper(resource.get_input_stream(), encoding=encoding)
