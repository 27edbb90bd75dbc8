"""Error rendering for the command line.

Resource errors already name the resource description or the offending
location, so they are shown behind a short label instead of the exception
type. Everything else falls back to ``TypeName: message``.
"""

import httpx
from pydantic import ValidationError
from rich.markup import escape as _escape_markup

from ..exceptions import AlreadyConsumedError
from ..exceptions import MalformedLocationError
from ..exceptions import NotFoundError
from ..exceptions import NotResolvableError

NO_DETAILS = "(no additional details)"

# Checked in order, so subclasses come before their bases
ERROR_LABELS: list[tuple[type[BaseException], str]] = [
    (NotResolvableError, "Not resolvable"),
    (NotFoundError, "Not found"),
    (AlreadyConsumedError, "Already consumed"),
    (httpx.TimeoutException, "Timed out"),
    (TimeoutError, "Timed out"),
    (ConnectionError, "Connection failed"),
]


def _format_validation_error(e: ValidationError) -> str:
    problems = []
    for error in e.errors():
        field = ".".join(str(part) for part in error["loc"]) or "value"
        problems.append(f"{field}: {error['msg']}")
    return "Invalid setting " + "; ".join(problems)


def format_error_message(e: BaseException) -> str:
    """Render an exception as a one-line message.

    Args:
        e: The exception to render

    Returns:
        A non-empty message

    Examples:
        >>> format_error_message(NotFoundError("file [/tmp/x] (No such file or directory)"))
        'Not found: file [/tmp/x] (No such file or directory)'

        >>> format_error_message(MalformedLocationError("x.txt", "no protocol: x.txt"))
        "Invalid location 'x.txt': no protocol: x.txt"
    """
    if isinstance(e, ValidationError):
        return _format_validation_error(e)

    detail = str(e) or NO_DETAILS
    if isinstance(e, MalformedLocationError):
        return f"Invalid location {e.location!r}: {detail}"
    for exc_type, label in ERROR_LABELS:
        if isinstance(e, exc_type):
            return f"{label}: {detail}"
    return f"{type(e).__name__}: {detail}"


def escape_markup(value: object) -> str:
    """Escape a value for Rich markup.

    Resource descriptions look like ``file [/tmp/x]``; unescaped, Rich
    would take the brackets for markup tags.
    """
    return _escape_markup(str(value))
