"""
Entity id generation.

Ids are a millisecond timestamp followed by a random base-36 suffix.
The timestamp keeps ids unique across re-creation of an entity with the
same content; the suffix keeps ids unique within a single millisecond.
"""

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_SUFFIX_LENGTH = 9


def generate_id() -> str:
    """Create a new opaque entity id, e.g. '1739870400123k3j9x0a1b'."""
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{millis}{suffix}"
