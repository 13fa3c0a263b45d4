"""URL feature extraction."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import urlparse

from ..config import DEFAULT_KEYWORDS

logger = logging.getLogger(__name__)

SPECIAL_CHARS_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?~]")
# Dotted quad only; octet ranges are not checked.
IP_LITERAL_RE = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")


@dataclass(frozen=True)
class UrlFeatures:
    """Structural features of a single URL string."""

    length: int = 0
    uses_secure_scheme: bool = False
    subdomain_count: int = 0
    host_is_ip_literal: bool = False
    special_char_count: int = 0
    matched_keywords: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        return {
            "length": self.length,
            "uses_secure_scheme": self.uses_secure_scheme,
            "subdomain_count": self.subdomain_count,
            "host_is_ip_literal": self.host_is_ip_literal,
            "special_char_count": self.special_char_count,
            "matched_keywords": sorted(self.matched_keywords),
        }


def _subdomain_count(host: str) -> int:
    labels = [part for part in host.rstrip(".").split(".") if part]
    return max(0, len(labels) - 2)


def extract_features(url: str, keywords: Iterable[str] = DEFAULT_KEYWORDS) -> UrlFeatures:
    """
    Extract features from a URL string.

    Never raises: when the URL cannot be parsed, scheme and host derived
    fields keep their defaults and only the raw-string features are filled in.
    """
    raw = url if isinstance(url, str) else ""
    lowered = raw.lower()

    length = len(raw)
    special_char_count = len(SPECIAL_CHARS_RE.findall(raw))
    matched = frozenset(kw for kw in (k.lower() for k in keywords) if kw and kw in lowered)

    try:
        parsed = urlparse(raw)
        scheme = (parsed.scheme or "").lower()
        host = (parsed.hostname or "").lower()
    except ValueError as exc:
        logger.debug("Could not parse %r for feature extraction: %s", raw, exc)
        scheme, host = "", ""

    return UrlFeatures(
        length=length,
        uses_secure_scheme=scheme == "https",
        subdomain_count=_subdomain_count(host) if host else 0,
        host_is_ip_literal=bool(host) and bool(IP_LITERAL_RE.search(host)),
        special_char_count=special_char_count,
        matched_keywords=matched,
    )
