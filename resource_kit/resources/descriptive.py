"""Placeholder resource that only carries a description."""

from typing import BinaryIO

from ..exceptions import NotFoundError
from .base import Resource


class DescriptiveResource(Resource):
    """Resource standing in for content that is not actually available.

    Returned where an API requires a Resource but there is nothing to read,
    for example to report where some definition would have come from.
    """

    def __init__(self, description: str | None = None):
        self._description = description or ""

    def exists(self) -> bool:
        return False

    def is_readable(self) -> bool:
        return False

    def get_input_stream(self) -> BinaryIO:
        raise NotFoundError(f"{self.get_description()} cannot be opened because it does not point to a readable resource")

    def get_description(self) -> str:
        return self._description

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, DescriptiveResource):
            return NotImplemented
        return self._description == other._description

    def __hash__(self) -> int:
        return hash(self._description)
