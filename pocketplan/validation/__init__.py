"""Call-site validation package."""

from pocketplan.validation.validator import LedgerValidator

__all__ = ["LedgerValidator"]
