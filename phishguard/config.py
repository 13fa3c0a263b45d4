"""Configuration management for PhishGuard."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Set

import yaml
from dotenv import load_dotenv

from .utils.domains import canonicalize_domain

logger = logging.getLogger(__name__)


# Known-bad hosts/paths. Matched as substrings of the lowercased URL.
DEFAULT_DENYLIST: set[str] = {
    "phishing.example.com",
    "malicious-site.org",
}

# Known-good hosts. Matched as substrings of the URL host.
DEFAULT_ALLOWLIST: set[str] = {
    "safe.example.com",
    "google.com",
    "github.com",
}

DEFAULT_KEYWORDS: tuple[str, ...] = (
    "login",
    "verify",
    "secure",
    "account",
    "bank",
    "password",
    "confirm",
    "support",
)

# Default numeric heuristics. These can be overridden via config/heuristics.yaml.
DEFAULT_LONG_URL_LENGTH = 75
DEFAULT_SPECIAL_CHAR_THRESHOLD = 5
DEFAULT_KEYWORD_MATCH_THRESHOLD = 2
DEFAULT_FALLBACK_THRESHOLD = 0.5

EXPLAINER_BACKENDS = ("template", "ollama")


@dataclass(frozen=True)
class HeuristicsConfig:
    """Immutable tunables handed to the classifier."""

    denylist: frozenset[str] = frozenset(DEFAULT_DENYLIST)
    allowlist: frozenset[str] = frozenset(DEFAULT_ALLOWLIST)
    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    long_url_length: int = DEFAULT_LONG_URL_LENGTH
    special_char_threshold: int = DEFAULT_SPECIAL_CHAR_THRESHOLD
    keyword_match_threshold: int = DEFAULT_KEYWORD_MATCH_THRESHOLD
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # HTTP API
    server_host: str = "127.0.0.1"
    server_port: int = 8080

    # Explanation generation
    explainer_backend: str = "template"  # template | ollama
    explanation_timeout: float = 15.0
    ollama_url: str = "http://127.0.0.1:11434"
    ollama_model: str = "llama3.1:8b"

    # Tier-6 fallback policy
    fallback_threshold: float = DEFAULT_FALLBACK_THRESHOLD
    fallback_seed: Optional[int] = None

    # Heuristic thresholds
    long_url_length: int = DEFAULT_LONG_URL_LENGTH
    special_char_threshold: int = DEFAULT_SPECIAL_CHAR_THRESHOLD
    keyword_match_threshold: int = DEFAULT_KEYWORD_MATCH_THRESHOLD

    # Paths
    config_dir: Path = field(default_factory=lambda: Path("./config"))

    # Loaded lists
    allowlist: Set[str] = field(default_factory=lambda: set(DEFAULT_ALLOWLIST))
    denylist: Set[str] = field(default_factory=lambda: set(DEFAULT_DENYLIST))
    keywords: list[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))

    def __post_init__(self):
        """Load list overrides from the config directory."""
        self.config_dir = Path(self.config_dir)
        self._load_lists()

    def _load_lists(self):
        """Load allowlist, denylist, and keywords from config files."""
        allowlist_path = self.config_dir / "allowlist.txt"
        denylist_path = self.config_dir / "denylist.txt"
        keywords_path = self.config_dir / "keywords.txt"

        if allowlist_path.exists():
            raw_allowlist = self._load_list_file(allowlist_path)
            self.allowlist = {
                canonicalize_domain(item) or item for item in raw_allowlist
            }
        if denylist_path.exists():
            # Denylist entries may carry paths, so they are only lowercased.
            self.denylist = self._load_list_file(denylist_path)
        if keywords_path.exists():
            self.keywords = sorted(self._load_list_file(keywords_path))

    @staticmethod
    def _load_list_file(path: Path) -> Set[str]:
        """Load a list file, ignoring comments and empty lines."""
        items = set()
        with open(path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    items.add(line.lower())
        return items

    def heuristics(self) -> HeuristicsConfig:
        """Snapshot the classifier tunables as immutable configuration."""
        return HeuristicsConfig(
            denylist=frozenset(d.lower() for d in self.denylist),
            allowlist=frozenset(a.lower() for a in self.allowlist),
            keywords=tuple(k.lower() for k in self.keywords),
            long_url_length=self.long_url_length,
            special_char_threshold=self.special_char_threshold,
            keyword_match_threshold=self.keyword_match_threshold,
            fallback_threshold=self.fallback_threshold,
        )


def _load_heuristics(config_dir: Path) -> dict:
    """Load heuristic overrides from config/heuristics.yaml (optional)."""
    path = Path(config_dir or ".") / "heuristics.yaml"
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except Exception as exc:
        logger.warning("Failed to parse heuristics.yaml: %s", exc)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring heuristics.yaml: expected a mapping, got %s", type(data).__name__)
        return {}

    def _coerce(key: str, cast):
        raw = data.get(key)
        if raw is None:
            return None
        try:
            return cast(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid heuristics.yaml value for %s: %r", key, raw)
            return None

    overrides = {
        "long_url_length": _coerce("long_url_length", int),
        "special_char_threshold": _coerce("special_char_threshold", int),
        "keyword_match_threshold": _coerce("keyword_match_threshold", int),
        "fallback_threshold": _coerce("fallback_threshold", float),
    }
    return {key: value for key, value in overrides.items() if value is not None}


def _optional_int(value: str | None) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


def load_config() -> Config:
    """Load configuration from environment variables."""
    load_dotenv()

    config_dir = Path(os.getenv("CONFIG_DIR", "./config"))
    heuristics = _load_heuristics(config_dir)

    return Config(
        server_host=os.getenv("PHISHGUARD_HOST", "127.0.0.1"),
        server_port=int(os.getenv("PHISHGUARD_PORT", "8080")),
        explainer_backend=os.getenv("PHISHGUARD_EXPLAINER", "template").strip().lower() or "template",
        explanation_timeout=float(os.getenv("PHISHGUARD_EXPLANATION_TIMEOUT", "15")),
        ollama_url=os.getenv("OLLAMA_URL", "http://127.0.0.1:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "llama3.1:8b"),
        fallback_threshold=float(
            os.getenv(
                "PHISHGUARD_FALLBACK_THRESHOLD",
                str(heuristics.get("fallback_threshold", DEFAULT_FALLBACK_THRESHOLD)),
            )
        ),
        fallback_seed=_optional_int(os.getenv("PHISHGUARD_FALLBACK_SEED")),
        long_url_length=heuristics.get("long_url_length", DEFAULT_LONG_URL_LENGTH),
        special_char_threshold=heuristics.get("special_char_threshold", DEFAULT_SPECIAL_CHAR_THRESHOLD),
        keyword_match_threshold=heuristics.get("keyword_match_threshold", DEFAULT_KEYWORD_MATCH_THRESHOLD),
        config_dir=config_dir,
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []
    if not 0.0 <= config.fallback_threshold <= 1.0:
        errors.append("PHISHGUARD_FALLBACK_THRESHOLD must be between 0 and 1")
    if config.explainer_backend not in EXPLAINER_BACKENDS:
        errors.append(
            f"PHISHGUARD_EXPLAINER must be one of {', '.join(EXPLAINER_BACKENDS)}"
        )
    if config.explanation_timeout <= 0:
        errors.append("PHISHGUARD_EXPLANATION_TIMEOUT must be positive")
    if config.explainer_backend == "ollama" and not (config.ollama_url or "").strip():
        errors.append("Ollama explainer selected but OLLAMA_URL missing")
    if config.long_url_length < 0 or config.special_char_threshold < 0:
        errors.append("URL length and special character thresholds must be non-negative")
    if config.keyword_match_threshold < 1:
        errors.append("keyword_match_threshold must be at least 1")

    if not config.denylist:
        logger.info("Denylist is empty; known-phishing tier will never match")

    return errors
