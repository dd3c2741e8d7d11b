"""
Change Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of what the user did in a session
2. Debugging capability when persisted state looks wrong
3. A record of persistence failures, which are never surfaced to callers

The change logger:
- Subscribes to the Entity Store rather than being called by it
- Never raises into the store (a logging failure must not break a mutation)
"""

import logging
import sys
from typing import Callable, Optional

import structlog

from pocketplan.config import get_settings
from pocketplan.models.events import LedgerEvent, LedgerEventSeverity


_configured = False


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog over the standard library logging module.

    Called once at startup; later calls are ignored unless `force` is set.
    Defaults come from AppSettings.
    """
    global _configured
    if _configured and not force:
        return

    app_settings = get_settings().app
    level = level or app_settings.log_level
    json_logs = app_settings.log_json if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
        force=force,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


class ChangeLogger:
    """
    Writes every LedgerEvent to the structured log.

    Usage:
        change_logger = ChangeLogger()
        change_logger.attach(store)
    """

    def __init__(self):
        self._logger = structlog.get_logger(__name__)
        self._detach: Optional[Callable[[], None]] = None
        self.events_logged = 0

    def log(self, event: LedgerEvent) -> None:
        """Log a single event at a level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == LedgerEventSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == LedgerEventSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == LedgerEventSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)

        self.events_logged += 1

    def attach(self, store) -> None:
        """Subscribe to a store's change events."""
        self.detach()
        self._detach = store.subscribe(self.log)

    def detach(self) -> None:
        if self._detach is not None:
            self._detach()
            self._detach = None
