"""Input URL validation and normalization."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

INVALID_URL_MESSAGE = "Invalid URL format. Please enter a valid URL (e.g., https://example.com)."
NOT_A_STRING_MESSAGE = "URL must be provided as text."

SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
# Schemes whose URLs must name a host.
HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


@dataclass
class UrlValidation:
    """Outcome of validating a submitted URL."""

    normalized_url: Optional[str] = None
    messages: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.normalized_url is not None and not self.messages


def _normalize(parts) -> str:
    netloc = parts.netloc
    if "@" in netloc:
        creds, _, hostport = netloc.rpartition("@")
        netloc = creds + "@" + hostport.lower()
    else:
        netloc = netloc.lower()
    return urlunsplit((parts.scheme.lower(), netloc, parts.path, parts.query, parts.fragment))


def validate_url(raw: object) -> UrlValidation:
    """Check that ``raw`` is a syntactically valid absolute URL.

    The normalized form strips surrounding whitespace and lowercases the
    scheme and host; everything else is kept as submitted.
    """
    if not isinstance(raw, str):
        return UrlValidation(messages=[NOT_A_STRING_MESSAGE])

    candidate = raw.strip()
    if not candidate or not SCHEME_RE.match(candidate) or re.search(r"\s", candidate):
        return UrlValidation(messages=[INVALID_URL_MESSAGE])

    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError:
        return UrlValidation(messages=[INVALID_URL_MESSAGE])

    scheme = parts.scheme.lower()
    if scheme in HOST_SCHEMES:
        if not hostname:
            return UrlValidation(messages=[INVALID_URL_MESSAGE])
    elif not (parts.netloc or parts.path or parts.query):
        return UrlValidation(messages=[INVALID_URL_MESSAGE])

    return UrlValidation(normalized_url=_normalize(parts))
