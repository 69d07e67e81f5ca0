"""Random identifiers for requests and spans.

The ``req-`` and ``span-`` prefixes only make logs easier to read; they
carry no meaning.
"""

import secrets

REQUEST_ID_PREFIX = "req-"
SPAN_ID_PREFIX = "span-"

# 16 bytes = 128 bits, rendered as 32 lowercase hex characters
_ID_BYTES = 16


def generate_request_id() -> str:
    """Return a fresh request identifier, e.g. ``req-3f2a...``."""
    return f"{REQUEST_ID_PREFIX}{secrets.token_hex(_ID_BYTES)}"


def generate_span_id() -> str:
    """Return a fresh span identifier, e.g. ``span-9c01...``."""
    return f"{SPAN_ID_PREFIX}{secrets.token_hex(_ID_BYTES)}"
