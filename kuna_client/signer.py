"""Request signing.

Kuna authenticates a request with
``HEX(HMAC-SHA256("VERB|path|query", secret_key))`` where ``query`` is the
exact query string sent, including ``access_key`` and ``tonce`` but without
``signature``.
"""

from __future__ import annotations

import hashlib
import hmac
from urllib.parse import urlsplit

from kuna_client.errors import ConfigurationError, MalformedInputError


SUPPORTED_VERBS = ("GET", "POST")


def _normalize_verb(verb: str) -> str:
    if not isinstance(verb, str) or verb.upper() not in SUPPORTED_VERBS:
        raise MalformedInputError(f"Unsupported HTTP verb: {verb!r}")
    return verb.upper()


def canonical_string(verb: str, path_with_query: str) -> str:
    """Build the string that gets signed.

    ``path_with_query`` may be relative (``/trades/my?...``) or an absolute
    URL; only its path and query take part. With no query the trailing
    ``|query`` segment is omitted.
    """
    verb = _normalize_verb(verb)
    if not isinstance(path_with_query, str) or not path_with_query.strip():
        raise MalformedInputError("path_with_query must be a non-empty string")
    try:
        parts = urlsplit(path_with_query)
    except ValueError as exc:
        raise MalformedInputError(f"Cannot parse {path_with_query!r}: {exc}") from exc
    if not parts.path.startswith("/"):
        raise MalformedInputError(f"Path must start with '/': {path_with_query!r}")
    if parts.query:
        return f"{verb}|{parts.path}|{parts.query}"
    return f"{verb}|{parts.path}"


def sign(verb: str, path_with_query: str, secret_key: str) -> str:
    if not secret_key:
        raise ConfigurationError("secret key is required to sign requests")
    message = canonical_string(verb, path_with_query).encode("utf-8")
    return hmac.new(secret_key.encode("utf-8"), message, hashlib.sha256).hexdigest()
