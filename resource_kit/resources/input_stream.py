"""Single-use resource over an already open stream."""

import logging
from typing import BinaryIO

from ..exceptions import AlreadyConsumedError
from .base import Resource

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "resource loaded through InputStream"


class InputStreamResource(Resource):
    """Resource wrapping a stream that has already been opened.

    The stream can be handed out exactly once. Prefer any other resource
    type when one applies; this one cannot be re-read.
    """

    def __init__(self, input_stream: BinaryIO, description: str | None = None):
        if input_stream is None:
            raise ValueError("InputStream must not be None")
        self._input_stream = input_stream
        self._description = description or ""
        self._read = False

    def exists(self) -> bool:
        return True

    def is_open(self) -> bool:
        return True

    def get_input_stream(self) -> BinaryIO:
        if self._read:
            raise AlreadyConsumedError(
                "InputStream has already been read - do not use InputStreamResource if a stream "
                "needs to be read multiple times"
            )
        self._read = True
        logger.debug(f"Handing out stream of {self.get_description()}")
        return self._input_stream

    def get_description(self) -> str:
        return f"InputStream resource [{self._description or DEFAULT_DESCRIPTION}]"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, InputStreamResource):
            return NotImplemented
        return self._input_stream is other._input_stream

    def __hash__(self) -> int:
        return id(self._input_stream)
