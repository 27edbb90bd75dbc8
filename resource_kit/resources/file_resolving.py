"""Resources that resolve URLs to files where possible.

Every check is answered from scratch on each call. File-family URLs are
answered from the filesystem; anything else goes through a fresh URL
connection and an ordered list of probes. Each probe returns True or False
when it can decide, or None to hand over to the next probe.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from ..connection import IO_ERRORS
from ..connection import HttpConnection
from ..connection import JarConnection
from ..connection import UrlConnection
from ..connection import open_connection
from ..exceptions import NotFoundError
from ..locations import URL_PROTOCOL_FILE
from ..locations import URL_PROTOCOL_VFS
from ..locations import extract_archive_url
from ..locations import get_file
from ..locations import get_protocol
from ..locations import is_file_url
from ..locations import is_jar_url
from ..locations import use_caches_if_necessary
from ..settings import get_connection_settings
from .base import Resource
from .base import file_last_modified
from .base import file_length
from .base import is_readable_file

logger = logging.getLogger(__name__)

Probe = Callable[[UrlConnection], bool | None]


def _vfs_resource(url: str) -> Resource:
    from .. import vfs
    from .vfs import VfsResource

    return VfsResource(vfs.get_root(url))


class FileResolvingResource(Resource):
    """Base for URL-backed resources that may resolve to files."""

    def exists(self) -> bool:
        try:
            url = self.get_url()
            if is_file_url(url):
                return self.get_file().exists()
            return self._run_probes(
                url,
                [
                    self._probe_http_status,
                    self._probe_positive_length,
                    self._probe_http_give_up,
                    self._probe_stream,
                ],
            )
        except IO_ERRORS as e:
            logger.debug(f"Existence check of {self.get_description()} failed: {e}")
            return False

    def is_readable(self) -> bool:
        try:
            return self.check_readable(self.get_url())
        except IO_ERRORS:
            return False

    def check_readable(self, url: str) -> bool:
        """Check whether the content behind ``url`` can be read."""
        try:
            if is_file_url(url):
                return is_readable_file(self.get_file())
            return self._run_probes(
                url,
                [
                    self._probe_http_ok,
                    self._probe_jar_entry,
                    self._probe_content_length,
                    self._probe_stream,
                ],
            )
        except IO_ERRORS as e:
            logger.debug(f"Readability check of {url} failed: {e}")
            return False

    def _run_probes(self, url: str, probes: list[Probe]) -> bool:
        con = self._open_connection(url)
        try:
            for probe in probes:
                decision = probe(con)
                if decision is not None:
                    return decision
            return False
        finally:
            con.disconnect()

    def _probe_http_status(self, con: UrlConnection) -> bool | None:
        if isinstance(con, HttpConnection):
            code = con.response_code()
            if code == 200:
                return True
            if code == 404:
                return False
        return None

    def _probe_positive_length(self, con: UrlConnection) -> bool | None:
        return True if con.content_length() > 0 else None

    def _probe_http_give_up(self, con: UrlConnection) -> bool | None:
        # No OK status and no content length
        return False if isinstance(con, HttpConnection) else None

    def _probe_http_ok(self, con: UrlConnection) -> bool | None:
        if isinstance(con, HttpConnection) and con.response_code() != 200:
            return False
        return None

    def _probe_jar_entry(self, con: UrlConnection) -> bool | None:
        if isinstance(con, JarConnection):
            entry = con.get_jar_entry()
            return entry is not None and not entry.is_dir()
        return None

    def _probe_content_length(self, con: UrlConnection) -> bool | None:
        length = con.content_length()
        if length > 0:
            return True
        if length == 0:
            # Empty file or directory
            return False
        return None

    def _probe_stream(self, con: UrlConnection) -> bool | None:
        self.get_input_stream().close()
        return True

    def is_file(self) -> bool:
        try:
            url = self.get_url()
            protocol = get_protocol(url)
            if protocol.startswith(URL_PROTOCOL_VFS):
                return _vfs_resource(url).is_file()
            return protocol == URL_PROTOCOL_FILE
        except IO_ERRORS:
            return False

    def get_file(self) -> Path:
        url = self.get_url()
        if get_protocol(url).startswith(URL_PROTOCOL_VFS):
            return _vfs_resource(url).get_file()
        return get_file(url, self.get_description())

    def get_file_for_last_modified_check(self) -> Path:
        url = self.get_url()
        if is_jar_url(url):
            actual_url = extract_archive_url(url)
            if get_protocol(actual_url).startswith(URL_PROTOCOL_VFS):
                return _vfs_resource(actual_url).get_file()
            return get_file(actual_url, "Jar URL")
        return self.get_file()

    def is_file_uri(self, uri: str) -> bool:
        try:
            protocol = get_protocol(uri)
            if protocol.startswith(URL_PROTOCOL_VFS):
                return _vfs_resource(uri).is_file()
            return protocol == URL_PROTOCOL_FILE
        except IO_ERRORS:
            return False

    def get_file_from_uri(self, uri: str) -> Path:
        if get_protocol(uri).startswith(URL_PROTOCOL_VFS):
            return _vfs_resource(uri).get_file()
        return get_file(uri, self.get_description())

    def readable_channel(self) -> BinaryIO:
        try:
            return open(self.get_file(), "rb", buffering=0)
        except FileNotFoundError:
            return super().readable_channel()

    def content_length(self) -> int:
        url = self.get_url()
        if is_file_url(url):
            path = self.get_file()
            length = file_length(path)
            if length == 0 and not path.exists():
                raise NotFoundError(
                    f"{self.get_description()} cannot be resolved in the file system for checking its content length"
                )
            return length

        con = self._open_connection(url)
        try:
            return con.content_length()
        finally:
            con.disconnect()

    def last_modified(self) -> int:
        url = self.get_url()
        file_check = False
        if is_file_url(url) or is_jar_url(url):
            file_check = True
            try:
                file_to_check = self.get_file_for_last_modified_check()
                last_modified = file_last_modified(file_to_check)
                if last_modified > 0 or file_to_check.exists():
                    return last_modified
            except NotFoundError as e:
                logger.debug(f"Falling back to connection for last-modified of {self.get_description()}: {e}")

        con = self._open_connection(url)
        try:
            last_modified = con.last_modified()
            if file_check and last_modified == 0 and con.content_length() <= 0:
                raise NotFoundError(
                    f"{self.get_description()} cannot be resolved in the file system "
                    "for checking its last-modified timestamp"
                )
            return last_modified
        finally:
            con.disconnect()

    def _open_connection(self, url: str) -> UrlConnection:
        """Open and customize a header-probing connection to ``url``."""
        con = open_connection(url)
        self.customize_connection(con)
        if isinstance(con, HttpConnection):
            con.request_method = "HEAD"
        return con

    def customize_connection(self, con: UrlConnection) -> None:
        """Prepare a connection before it is used.

        Applies cache policy and configured timeouts and headers, then hands
        HTTP connections to :meth:`customize_http_connection`.
        """
        use_caches_if_necessary(con)

        settings = get_connection_settings()
        con.connect_timeout = settings.connect_timeout
        con.read_timeout = settings.read_timeout
        con.follow_redirects = settings.follow_redirects
        for key, value in settings.headers.items():
            con.set_request_property(key, value)
        if settings.user_agent:
            con.set_request_property("User-Agent", settings.user_agent)

        if isinstance(con, HttpConnection):
            self.customize_http_connection(con)

    def customize_http_connection(self, con: HttpConnection) -> None:
        """Hook for subclasses to adjust HTTP connections (headers, transport)."""