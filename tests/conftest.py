"""Pytest configuration for resource-kit tests."""

import io
import sys
import zipfile
from pathlib import Path

import pytest

# Add the repository root to sys.path so the package (and its data files)
# can be found through the import path in class path tests
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from resource_kit import vfs  # noqa: E402
from resource_kit.settings import ConnectionSettings  # noqa: E402
from resource_kit.settings import set_connection_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings():
    """Use default connection settings instead of the user's files."""
    set_connection_settings(ConnectionSettings())
    yield
    set_connection_settings(None)
    vfs.uninstall_vfs()


@pytest.fixture
def text_file(tmp_path):
    """A small readable file containing 'hi'."""
    path = tmp_path / "hi.txt"
    path.write_text("hi")
    return path


@pytest.fixture
def jar_file(tmp_path):
    """A JAR with a file entry, a directory entry and an empty entry."""
    path = tmp_path / "app.jar"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("config/", "")
        archive.writestr("config/app.properties", "key=value")
        archive.writestr("empty.txt", "")
    return path


@pytest.fixture
def war_file(tmp_path):
    """A WAR holding a nested JAR under WEB-INF/lib."""
    inner = tmp_path / "inner.jar"
    with zipfile.ZipFile(inner, "w") as archive:
        archive.writestr("y.txt", "nested content")

    path = tmp_path / "app.war"
    with zipfile.ZipFile(path, "w") as archive:
        archive.write(inner, "WEB-INF/lib/inner.jar")
        archive.writestr("index.html", "<html></html>")
    return path


class MemoryVirtualFile:
    """In-memory virtual file backed by a dict of path -> bytes."""

    def __init__(self, files: dict[str, bytes], path: str, physical_root: Path):
        self.files = files
        self.path = path
        self.physical_root = physical_root

    def exists(self) -> bool:
        return self.path in self.files

    def get_size(self) -> int:
        return len(self.files.get(self.path, b""))

    def get_last_modified(self) -> int:
        return 1_000

    def open_stream(self):
        if self.path not in self.files:
            raise FileNotFoundError(self.path)
        return io.BytesIO(self.files[self.path])

    def to_url(self) -> str:
        return "vfs:" + self.path

    def to_uri(self) -> str:
        return "vfs:" + self.path

    def get_name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def get_path_name(self) -> str:
        return self.path

    def get_physical_file(self) -> Path:
        return self.physical_root / self.path.lstrip("/")

    def get_child(self, path: str) -> "MemoryVirtualFile":
        return MemoryVirtualFile(self.files, self.path.rstrip("/") + "/" + path, self.physical_root)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MemoryVirtualFile) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)


@pytest.fixture
def memory_vfs(tmp_path):
    """Install an in-memory VFS with physical copies under tmp_path."""
    files = {"/root/a.txt": b"hello", "/root/empty.txt": b""}
    for path, content in files.items():
        physical = tmp_path / path.lstrip("/")
        physical.parent.mkdir(parents=True, exist_ok=True)
        physical.write_bytes(content)

    vfs.install_vfs(lambda url: MemoryVirtualFile(files, url.split(":", 1)[1], tmp_path))
    return files


@pytest.fixture
def vfs_file(memory_vfs, tmp_path):
    """Factory for virtual files inside the installed in-memory VFS."""

    def make(path: str) -> MemoryVirtualFile:
        return MemoryVirtualFile(memory_vfs, path, tmp_path)

    return make
