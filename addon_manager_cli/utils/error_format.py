"""Error message formatting for the terminal.

Server-supplied strings are escaped before being interpolated into Rich
markup.
"""

from rich.markup import escape as _escape_markup

from ..exceptions import AddonManagerError


def format_error_message(e: AddonManagerError) -> str:
    """Return the user-facing message of ``e``, never empty.

    Examples:
        >>> format_error_message(RemoteRejectedError("quota exceeded"))
        'quota exceeded'

        >>> format_error_message(NetworkError(""))
        'NetworkError: (no additional details)'
    """
    return e.message or f"{type(e).__name__}: (no additional details)"


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Addon names and server error messages may contain square brackets that
    Rich would otherwise treat as markup tags.
    """
    return _escape_markup(str(value))
