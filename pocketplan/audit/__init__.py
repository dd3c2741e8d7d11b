"""Change logging package."""

from pocketplan.audit.logger import ChangeLogger, configure_logging

__all__ = ["ChangeLogger", "configure_logging"]
