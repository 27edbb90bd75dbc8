"""Resources packaged inside importable Python packages."""

import logging
from importlib import resources
from importlib.resources.abc import Traversable
from types import ModuleType
from typing import BinaryIO

from ..exceptions import NotFoundError
from ..paths import apply_relative_path
from ..paths import clean_path
from ..paths import get_filename
from .base import Resource

logger = logging.getLogger(__name__)


class ModuleResource(Resource):
    """Resource read from an installed package with :mod:`importlib.resources`.

    Works for packages installed as directories, zips or wheels alike.

    Args:
        module: Package name or package module object
        path: Slash-separated path inside the package
    """

    def __init__(self, module: str | ModuleType, path: str):
        if module is None:
            raise ValueError("Module must not be None")
        if path is None:
            raise ValueError("Path must not be None")
        self._module = module
        self._module_name = module if isinstance(module, str) else module.__name__
        self._path = clean_path(path)

    @property
    def module_name(self) -> str:
        return self._module_name

    @property
    def path(self) -> str:
        return self._path

    def _lookup(self) -> Traversable | None:
        try:
            target = resources.files(self._module)
        except (ModuleNotFoundError, TypeError) as e:
            logger.debug(f"Cannot look up resources of module '{self._module_name}': {e}")
            return None
        for segment in self._path.lstrip("/").split("/"):
            if segment:
                target = target.joinpath(segment)
        return target

    def exists(self) -> bool:
        target = self._lookup()
        return target is not None and target.is_file()

    def get_input_stream(self) -> BinaryIO:
        target = self._lookup()
        if target is None or not target.is_file():
            raise NotFoundError(f"{self.get_description()} cannot be opened because it does not exist")
        return target.open("rb")

    def create_relative(self, relative_path: str) -> "ModuleResource":
        return ModuleResource(self._module, apply_relative_path(self._path, relative_path))

    def get_filename(self) -> str | None:
        return get_filename(self._path)

    def get_description(self) -> str:
        return f"module resource [{self._path}] from module '{self._module_name}'"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ModuleResource):
            return NotImplemented
        return self._module_name == other._module_name and self._path == other._path

    def __hash__(self) -> int:
        return hash((self._module_name, self._path))
