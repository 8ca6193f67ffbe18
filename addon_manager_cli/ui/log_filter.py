"""Log filter to suppress duplicate sync error lines from console output.

When a load or sync fails, SyncController logs the error and then reports
it through ``notify_error``, which the CLI renders in red. This filter,
attached to the console handler only, drops the logged copy so the user
sees the message once.

Log file handlers are unaffected; all records are preserved for debugging.
"""

import logging


class SyncErrorLogFilter(logging.Filter):
    """Suppress sync error records already shown through notify_error.

    Drops ERROR-level records starting with ``Sync error:``.
    Everything else passes through unchanged.
    """

    _SUPPRESSED_PREFIXES = ("Sync error:",)

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False to suppress the record, True to let it through."""
        if record.levelno != logging.ERROR:
            return True

        message = record.getMessage()
        return not any(message.startswith(prefix) for prefix in self._SUPPRESSED_PREFIXES)
