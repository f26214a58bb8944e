from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from postcode_anywhere.core.errors import ConfigurationError

load_dotenv()

CACHE_BACKENDS = ("memory", "sqlite", "none")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass
class Settings:
    # PCA licence
    pca_key: str | None
    pca_username: str | None

    # PCA endpoint
    pca_endpoint: str
    pca_version: str

    # Cache
    cache_backend: str
    cache_path: str
    cache_maxsize: int
    cache_ttl_seconds: int
    cache_cutoff: str | None

    # HTTP
    http_timeout_seconds: float
    http_verify_tls: bool
    http_user_agent: str


def _clean(s: str | None) -> str:
    return (s or "").strip().strip('"').strip("'")


def _int(name: str, default: int) -> int:
    v = _clean(os.getenv(name, str(default)))
    try:
        return int(v)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {v!r}") from e


def _float(name: str, default: float) -> float:
    v = _clean(os.getenv(name, str(default)))
    try:
        return float(v)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {v!r}") from e


def _bool(name: str, default: bool) -> bool:
    v = _clean(os.getenv(name, "true" if default else "false")).lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be one of {', '.join(_TRUE + _FALSE)}, got {v!r}")


def get_settings() -> Settings:
    """
    PCA_KEY가 없어도 여기서는 실패하지 않습니다.
    The missing licence is reported by the provider at lookup time as a
    ConfigurationError.
    """
    cache_backend = _clean(os.getenv("POSTCODE_CACHE_BACKEND", "memory")).lower()
    if cache_backend not in CACHE_BACKENDS:
        raise ConfigurationError(
            f"POSTCODE_CACHE_BACKEND must be one of {', '.join(CACHE_BACKENDS)}, got {cache_backend!r}"
        )

    return Settings(
        # licence
        pca_key=_clean(os.getenv("PCA_KEY")) or None,
        pca_username=_clean(os.getenv("PCA_USERNAME")) or None,
        # endpoint
        pca_endpoint=_clean(os.getenv("PCA_ENDPOINT", "RetrieveByParts")),
        pca_version=_clean(os.getenv("PCA_VERSION", "1.00")),
        # cache
        cache_backend=cache_backend,
        cache_path=_clean(os.getenv("POSTCODE_CACHE_PATH", "postcode_cache.db")),
        cache_maxsize=_int("POSTCODE_CACHE_MAXSIZE", 20000),
        cache_ttl_seconds=_int("POSTCODE_CACHE_TTL_SECONDS", 0),
        cache_cutoff=_clean(os.getenv("POSTCODE_CACHE_CUTOFF")) or None,
        # http
        http_timeout_seconds=_float("HTTP_TIMEOUT_SECONDS", 5.0),
        http_verify_tls=_bool("HTTP_VERIFY_TLS", True),
        http_user_agent=_clean(os.getenv("HTTP_USER_AGENT", "postcode-anywhere-mcp/0.1.0")),
    )
