"""In-memory resource over a byte array."""

import io
from typing import BinaryIO

from .base import Resource

DEFAULT_DESCRIPTION = "resource loaded from byte array"


class ByteArrayResource(Resource):
    """Resource over bytes held in memory.

    The bytes are copied on construction and again for every read, so
    neither the caller's buffer nor returned content is ever shared.
    Useful for feeding in-memory content to APIs that take a Resource.
    """

    def __init__(self, data: bytes | bytearray, description: str | None = None):
        if data is None:
            raise ValueError("Byte array must not be None")
        self._data = bytearray(data)
        self._description = description or ""

    @property
    def byte_array(self) -> bytes:
        return bytes(self._data)

    def exists(self) -> bool:
        return True

    def content_length(self) -> int:
        return len(self._data)

    def get_input_stream(self) -> BinaryIO:
        return io.BytesIO(bytes(self._data))

    def get_content_as_bytes(self) -> bytes:
        return bytes(self._data)

    def get_content_as_string(self, encoding: str = "utf-8") -> str:
        return self._data.decode(encoding)

    def get_description(self) -> str:
        return f"Byte array resource [{self._description or DEFAULT_DESCRIPTION}]"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ByteArrayResource):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(bytes(self._data))
