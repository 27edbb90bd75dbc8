"""URL connections for the protocols resources can be backed by.

One connection object per access, as with classic URL connections: create
it with :func:`open_connection`, customize it (timeouts, headers, caching),
query headers or open the stream, then :meth:`UrlConnection.disconnect`.

- ``file:`` is served from the local filesystem
- ``http:``/``https:`` go through httpx
- ``jar:``, ``war:``, ``zip:``, ``wsjar:`` read entries with zipfile,
  including archives nested inside archives
- ``vfs:``, ``vfsfile:``, ``vfszip:`` go through the installed VFS
"""

import io
import logging
import os
import time
import zipfile
from abc import ABC
from abc import abstractmethod
from email.utils import parsedate_to_datetime
from typing import BinaryIO
from urllib.parse import unquote

import httpx

from . import vfs
from .exceptions import MalformedLocationError
from .exceptions import NotFoundError
from .exceptions import ResourceError
from .locations import HTTP_PROTOCOLS
from .locations import JAR_PROTOCOLS
from .locations import JAR_URL_SEPARATOR
from .locations import URL_PROTOCOL_FILE
from .locations import URL_PROTOCOL_VFS
from .locations import URL_PROTOCOL_VFSFILE
from .locations import URL_PROTOCOL_VFSZIP
from .locations import URL_PROTOCOL_WAR
from .locations import WAR_URL_SEPARATOR
from .locations import get_file
from .locations import get_protocol
from .locations import get_url_file

logger = logging.getLogger(__name__)

# Errors that advisory checks fold to False
IO_ERRORS = (OSError, httpx.HTTPError, httpx.InvalidURL, zipfile.BadZipFile, ResourceError)

VFS_PROTOCOLS = frozenset({URL_PROTOCOL_VFS, URL_PROTOCOL_VFSFILE, URL_PROTOCOL_VFSZIP})


class UrlConnection(ABC):
    """Connection to the content behind a URL.

    ``content_length()`` returns -1 when unknown and ``last_modified()``
    returns 0 when unknown (milliseconds since the epoch otherwise).
    """

    def __init__(self, url: str):
        self.url = url
        self.use_caches = True
        self.connect_timeout: float | None = None
        self.read_timeout: float | None = None
        self.follow_redirects = True
        self.request_headers: dict[str, str] = {}

    def set_request_property(self, key: str, value: str) -> None:
        self.request_headers[key] = value

    @abstractmethod
    def content_length(self) -> int:
        pass

    @abstractmethod
    def last_modified(self) -> int:
        pass

    @abstractmethod
    def get_input_stream(self) -> BinaryIO:
        pass

    def disconnect(self) -> None:
        """Release whatever the connection holds open."""

    def __enter__(self) -> "UrlConnection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.disconnect()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url})"


class _ResponseStream(io.RawIOBase):
    """Binary stream over a streamed httpx response; closing releases the client."""

    def __init__(self, response: httpx.Response, client: httpx.Client):
        self._response = response
        self._client = client
        self._chunks = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
            self._client.close()
        super().close()


class HttpConnection(UrlConnection):
    """HTTP(S) connection backed by an httpx client.

    The request is sent lazily on the first header or stream access. Set
    ``request_method`` to "HEAD" before that for header-only probes, and
    ``transport`` to route requests through a custom httpx transport.
    """

    def __init__(self, url: str):
        super().__init__(url)
        self.request_method = "GET"
        self.transport: httpx.BaseTransport | None = None
        self._client: httpx.Client | None = None
        self._response: httpx.Response | None = None

    def _send(self) -> httpx.Response:
        if self._response is not None:
            return self._response

        headers = dict(self.request_headers)
        if not self.use_caches:
            headers.setdefault("Cache-Control", "no-cache")
        timeout = httpx.Timeout(None, connect=self.connect_timeout, read=self.read_timeout)

        client = httpx.Client(transport=self.transport, timeout=timeout, follow_redirects=self.follow_redirects)
        try:
            request = client.build_request(self.request_method, self.url, headers=headers)
            logger.debug(f"{self.request_method} {self.url}")
            self._response = client.send(request, stream=True)
        except httpx.InvalidURL as e:
            client.close()
            raise MalformedLocationError(self.url, str(e)) from e
        except httpx.TransportError as e:
            client.close()
            raise ConnectionError(f"Failed to connect to {self.url}: {e}") from e
        self._client = client
        return self._response

    def response_code(self) -> int:
        return self._send().status_code

    def content_length(self) -> int:
        value = self._send().headers.get("content-length")
        if value is None:
            return -1
        try:
            return int(value)
        except ValueError:
            return -1

    def last_modified(self) -> int:
        value = self._send().headers.get("last-modified")
        if not value:
            return 0
        try:
            return int(parsedate_to_datetime(value).timestamp() * 1000)
        except (TypeError, ValueError):
            logger.debug(f"Unparseable Last-Modified header from {self.url}: {value}")
            return 0

    def get_input_stream(self) -> BinaryIO:
        response = self._send()
        status = response.status_code
        if status in (404, 410):
            self.disconnect()
            raise NotFoundError(f"HTTP {status} for URL: {self.url}")
        if status >= 400:
            self.disconnect()
            raise OSError(f"Server returned HTTP response code: {status} for URL: {self.url}")

        # The stream now owns the response and the client
        stream = io.BufferedReader(_ResponseStream(response, self._client))
        self._response = None
        self._client = None
        return stream

    def disconnect(self) -> None:
        if self._response is not None:
            self._response.close()
            self._response = None
        if self._client is not None:
            self._client.close()
            self._client = None


class FileConnection(UrlConnection):
    """Connection to a ``file:`` URL; sizes and timestamps are 0 for missing files."""

    def __init__(self, url: str):
        super().__init__(url)
        self.path = get_file(url)

    def content_length(self) -> int:
        try:
            return os.stat(self.path).st_size
        except OSError:
            return 0

    def last_modified(self) -> int:
        try:
            return int(os.stat(self.path).st_mtime * 1000)
        except OSError:
            return 0

    def get_input_stream(self) -> BinaryIO:
        try:
            return open(self.path, "rb")
        except FileNotFoundError as e:
            raise NotFoundError(f"{self.path} (No such file or directory)") from e
        except IsADirectoryError as e:
            raise NotFoundError(f"{self.path} (Is a directory)") from e


class JarConnection(UrlConnection):
    """Connection to an entry inside a (possibly nested) ZIP-format archive.

    ``jar:file:/a.war!/WEB-INF/lib/x.jar!/y.txt`` and the Tomcat form
    ``war:file:/a.war*/WEB-INF/lib/x.jar!/y.txt`` both read ``y.txt`` from
    ``x.jar`` inside ``a.war``. ``jar:file:/a.jar!/`` addresses the archive
    itself.
    """

    def __init__(self, url: str):
        super().__init__(url)
        self.archive_url, self.entry_path = self._split(url)

    @staticmethod
    def _split(url: str) -> tuple[str, list[str]]:
        url_file = get_url_file(url)
        if get_protocol(url) == URL_PROTOCOL_WAR and WAR_URL_SEPARATOR in url_file:
            archive_url, _separator, rest = url_file.partition(WAR_URL_SEPARATOR)
        else:
            archive_url, separator, rest = url_file.partition(JAR_URL_SEPARATOR)
            if not separator:
                raise MalformedLocationError(url, f"no {JAR_URL_SEPARATOR} in archive URL: {url}")
        return archive_url, [unquote(part) for part in rest.split(JAR_URL_SEPARATOR)]

    @property
    def entry_name(self) -> str | None:
        """Name of the addressed entry, None for the archive itself."""
        name = self.entry_path[-1]
        return name or None

    def _read_outer_archive(self) -> zipfile.ZipFile:
        if get_protocol(self.archive_url) == URL_PROTOCOL_FILE:
            path = get_file(self.archive_url)
            try:
                return zipfile.ZipFile(path)
            except FileNotFoundError as e:
                raise NotFoundError(f"{path} (No such file or directory)") from e

        con = open_connection(self.archive_url)
        try:
            with con.get_input_stream() as stream:
                return zipfile.ZipFile(io.BytesIO(stream.read()))
        finally:
            con.disconnect()

    def _open_archive(self) -> zipfile.ZipFile:
        """Open the innermost archive holding the addressed entry."""
        archive = self._read_outer_archive()
        for nested_name in self.entry_path[:-1]:
            with archive:
                try:
                    data = archive.read(nested_name)
                except KeyError as e:
                    raise NotFoundError(f"JAR entry {nested_name} not found in {self.archive_url}") from e
            archive = zipfile.ZipFile(io.BytesIO(data))
        return archive

    @staticmethod
    def _find_entry(archive: zipfile.ZipFile, name: str) -> zipfile.ZipInfo | None:
        for candidate in (name, name.rstrip("/") + "/"):
            try:
                return archive.getinfo(candidate)
            except KeyError:
                continue
        return None

    def get_jar_entry(self) -> zipfile.ZipInfo | None:
        """Return the addressed entry, or None when absent or for the archive itself."""
        if self.entry_name is None:
            return None
        with self._open_archive() as archive:
            return self._find_entry(archive, self.entry_name)

    def content_length(self) -> int:
        try:
            if self.entry_name is None:
                if get_protocol(self.archive_url) == URL_PROTOCOL_FILE:
                    return os.stat(get_file(self.archive_url)).st_size
                return -1
            entry = self.get_jar_entry()
        except (OSError, zipfile.BadZipFile, ResourceError) as e:
            logger.debug(f"Could not determine content length of {self.url}: {e}")
            return -1
        return entry.file_size if entry is not None else -1

    def last_modified(self) -> int:
        try:
            entry = self.get_jar_entry()
        except (OSError, zipfile.BadZipFile, ResourceError):
            return 0
        if entry is None:
            return 0
        return int(time.mktime(entry.date_time + (0, 0, -1)) * 1000)

    def get_input_stream(self) -> BinaryIO:
        if self.entry_name is None:
            return open_connection(self.archive_url).get_input_stream()
        with self._open_archive() as archive:
            entry = self._find_entry(archive, self.entry_name)
            if entry is None:
                raise NotFoundError(f"JAR entry {self.entry_name} not found in {self.archive_url}")
            return io.BytesIO(archive.read(entry))


class VfsConnection(UrlConnection):
    """Connection served by the installed virtual filesystem."""

    def __init__(self, url: str):
        super().__init__(url)
        self.virtual_file = vfs.get_root(url)

    def content_length(self) -> int:
        return self.virtual_file.get_size() if self.virtual_file.exists() else 0

    def last_modified(self) -> int:
        return self.virtual_file.get_last_modified() if self.virtual_file.exists() else 0

    def get_input_stream(self) -> BinaryIO:
        if not self.virtual_file.exists():
            raise NotFoundError(f"VFS resource does not exist: {self.url}")
        return self.virtual_file.open_stream()


def open_connection(url: str) -> UrlConnection:
    """Create the connection matching the protocol of a URL.

    Raises:
        MalformedLocationError: The protocol has no connection type
    """
    protocol = get_protocol(url)
    if protocol in HTTP_PROTOCOLS:
        return HttpConnection(url)
    if protocol == URL_PROTOCOL_FILE:
        return FileConnection(url)
    if protocol in VFS_PROTOCOLS:
        return VfsConnection(url)
    if protocol in JAR_PROTOCOLS:
        return JarConnection(url)
    raise MalformedLocationError(url, f"unknown protocol: {protocol}")
