"""Host normalization utilities."""

from __future__ import annotations

from urllib.parse import urlparse


def canonicalize_domain(value: str) -> str:
    """
    Normalize a domain/URL to a canonical host key.

    - Lowercase
    - Strip leading "www."
    - Ignore scheme/port/path/query/fragment
    """
    raw = (value or "").strip()
    if not raw:
        return ""

    candidate = raw if "://" in raw else f"https://{raw}"
    try:
        host = urlparse(candidate).hostname or raw.split("/")[0]
    except ValueError:
        host = raw.split("/")[0]
    host = host.strip().lower().strip(".")
    if not host:
        return ""

    if host.startswith("www.") and len(host) > 4:
        host = host[4:]

    return host
