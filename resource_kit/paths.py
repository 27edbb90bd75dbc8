"""Path string helpers for resource locations.

All functions are pure string operations. They never touch the filesystem
and never mutate their input.
"""

import inspect
import sys
from typing import Any

FOLDER_SEPARATOR = "/"
WINDOWS_FOLDER_SEPARATOR = "\\"
PACKAGE_SEPARATOR = "."
TOP_PATH = ".."
CURRENT_PATH = "."


def clean_path(path: str | None) -> str | None:
    """Normalize a location string.

    Converts backslashes to slashes and collapses ``.`` and ``..`` segments.
    A scheme prefix such as ``file:`` is kept verbatim and excluded from the
    collapsing, so ``file:core/../core/io/X`` becomes ``file:core/io/X``.
    Leading ``..`` segments that have nothing to cancel against are kept.

    Args:
        path: Location string (may be None or empty)

    Returns:
        Normalized location, or the input unchanged when empty
    """
    if not path:
        return path

    normalized = path.replace(WINDOWS_FOLDER_SEPARATOR, FOLDER_SEPARATOR)
    path_to_use = normalized

    # Nothing to collapse
    if "." not in path_to_use:
        return path_to_use

    # "file:core/../core" keeps its "file:" prefix; "a/b:c" has no prefix
    prefix = ""
    prefix_index = path_to_use.find(":")
    if prefix_index != -1:
        prefix = path_to_use[: prefix_index + 1]
        if FOLDER_SEPARATOR in prefix:
            prefix = ""
        else:
            path_to_use = path_to_use[prefix_index + 1 :]

    if path_to_use.startswith(FOLDER_SEPARATOR):
        prefix = prefix + FOLDER_SEPARATOR
        path_to_use = path_to_use[1:]

    elements = path_to_use.split(FOLDER_SEPARATOR)
    kept: list[str] = []
    tops = 0
    for element in reversed(elements):
        if element == CURRENT_PATH:
            continue
        if element == TOP_PATH:
            tops += 1
        elif tops > 0:
            # Erased by a following ".."
            tops -= 1
        else:
            kept.append(element)
    kept.reverse()

    if len(elements) == len(kept):
        return normalized

    kept = [TOP_PATH] * tops + kept

    # Nothing left: point explicitly at the current path
    if (not kept or kept == [""]) and not prefix.endswith(FOLDER_SEPARATOR):
        kept.insert(0, CURRENT_PATH)

    return prefix + FOLDER_SEPARATOR.join(kept)


def path_equals(path1: str, path2: str) -> bool:
    """Compare two paths after normalizing both."""
    return clean_path(path1) == clean_path(path2)


def apply_relative_path(path: str, relative_path: str) -> str:
    """Apply a relative path to a base path.

    The last segment of ``path`` is replaced, so ``/a/b`` + ``c`` gives
    ``/a/c`` while ``/a/b/`` + ``c`` gives ``/a/b/c``.

    Args:
        path: Base path, usually with ``/`` separators
        relative_path: Path to apply

    Returns:
        Combined path (not normalized)
    """
    separator_index = path.rfind(FOLDER_SEPARATOR)
    if separator_index == -1:
        return relative_path
    new_path = path[:separator_index]
    if not relative_path.startswith(FOLDER_SEPARATOR):
        new_path += FOLDER_SEPARATOR
    return new_path + relative_path


def get_filename(path: str | None) -> str | None:
    """Extract the last segment of a ``/``-separated path."""
    if path is None:
        return None
    separator_index = path.rfind(FOLDER_SEPARATOR)
    return path[separator_index + 1 :] if separator_index != -1 else path


def class_package_as_resource_path(obj: Any) -> str:
    """Return the package of a class or module as a slash-separated path.

    ``mypkg.sub.Thing`` becomes ``mypkg/sub``. Top-level modules and
    ``None`` yield an empty string.

    Args:
        obj: A class, a module, or None
    """
    if obj is None:
        return ""
    if not inspect.ismodule(obj):
        module_name = getattr(obj, "__module__", None) or ""
        module = sys.modules.get(module_name)
        if module is None:
            package_end = module_name.rfind(PACKAGE_SEPARATOR)
            package_name = module_name[:package_end] if package_end != -1 else ""
            return package_name.replace(PACKAGE_SEPARATOR, FOLDER_SEPARATOR)
        obj = module
    # A package is its own package; a plain module lives in __package__
    package_name = obj.__name__ if hasattr(obj, "__path__") else (obj.__package__ or "")
    return package_name.replace(PACKAGE_SEPARATOR, FOLDER_SEPARATOR)
