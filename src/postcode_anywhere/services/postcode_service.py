from __future__ import annotations

import logging
from typing import Protocol

from postcode_anywhere.core.errors import InvalidPostcode, TransportError, UpstreamDataError
from postcode_anywhere.core.freshness import FreshnessPolicy
from postcode_anywhere.core.models import (
    ERROR_INVALID_POSTCODE,
    ERROR_LOOKUP_FAIL,
    ERROR_NO_ADDRESSES,
    SOURCE_API,
    SOURCE_CACHE,
    AddressRecord,
    LookupResult,
    dump_records,
    load_records,
)
from postcode_anywhere.core.text import normalize_postcode
from postcode_anywhere.infra.cache import CACHE_KEY_COLUMN, CACHE_TABLE, CacheAdapter
from postcode_anywhere.infra.http import HttpClient
from postcode_anywhere.infra.providers.pca import Credentials, PostcodeAnywhereProvider
from postcode_anywhere.services.normalizer import normalize

log = logging.getLogger(__name__)


class AddressFetcher(Protocol):
    def fetch(self, postcode: str) -> str: ...


class PostcodeAddressService:
    """
    Cache-aside postcode -> addresses lookup.

    Every expected outcome (invalid input, transport failure, bad upstream
    payload) comes back as a LookupResult. Only ConfigurationError, raised
    by the fetcher when the licence key is missing, escapes.
    """

    def __init__(
        self,
        *,
        fetcher: AddressFetcher,
        cache: CacheAdapter | None = None,
        freshness: FreshnessPolicy | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._freshness = freshness or FreshnessPolicy()

    @property
    def freshness(self) -> FreshnessPolicy:
        return self._freshness

    def get(self, postcode: str, *, override_cache: bool = False) -> LookupResult:
        try:
            normalized = normalize_postcode(postcode)
        except InvalidPostcode:
            return LookupResult(
                postcode=postcode,
                error=ERROR_INVALID_POSTCODE,
                source=SOURCE_CACHE,
                data=None,
            )

        if not override_cache:
            cached = self._cache_find(normalized)
            if cached is not None:
                return LookupResult(postcode=postcode, error=False, source=SOURCE_CACHE, data=cached)

        try:
            raw = self._fetcher.fetch(normalized)
            records = normalize(raw)
        except TransportError as e:
            log.warning("Address lookup failed for %s: %s", normalized, e)
            return LookupResult(
                postcode=postcode,
                error=ERROR_LOOKUP_FAIL,
                error_detail=str(e),
                source=SOURCE_API,
                data=None,
            )
        except UpstreamDataError as e:
            log.warning("No usable addresses for %s: %s", normalized, e)
            return LookupResult(
                postcode=postcode,
                error=ERROR_NO_ADDRESSES,
                error_detail=str(e),
                source=SOURCE_API,
                data=[],
            )

        self._cache_save(normalized, records)
        return LookupResult(postcode=postcode, error=False, source=SOURCE_API, data=records)

    def _cache_find(self, postcode: str) -> list[AddressRecord] | None:
        if self._cache is None:
            return None

        entry = self._cache.find(CACHE_TABLE, postcode, CACHE_KEY_COLUMN)
        if entry is None:
            log.debug("Cache miss for postcode: %s", postcode)
            return None

        if not self._freshness.is_fresh(entry.created):
            log.debug("Stale cache entry for postcode: %s", postcode)
            return None

        try:
            records = load_records(entry.content)
        except ValueError as e:
            log.warning("Ignoring unreadable cache entry for %s: %s", postcode, e)
            return None

        log.debug("Cache hit for postcode: %s", postcode)
        return records

    def _cache_save(self, postcode: str, records: list[AddressRecord]) -> None:
        if self._cache is None:
            return
        try:
            self._cache.upsert(postcode, dump_records(records))
        except Exception as e:
            # the caller already has correct data; only the caching is lost
            log.warning("Cache write failed for %s: %s", postcode, e)


def get(
    postcode: str,
    credentials: Credentials | None,
    cache: CacheAdapter | None = None,
    override_cache: bool = False,
    *,
    freshness: FreshnessPolicy | None = None,
    http: HttpClient | None = None,
) -> LookupResult:
    """
    One-shot lookup with a default PCA provider.

    Raises ConfigurationError when no licence key is available.
    """
    owns_http = http is None
    if http is None:
        http = HttpClient(user_agent="postcode-anywhere-mcp/0.1.0")
    try:
        service = PostcodeAddressService(
            fetcher=PostcodeAnywhereProvider(http=http, credentials=credentials),
            cache=cache,
            freshness=freshness,
        )
        return service.get(postcode, override_cache=override_cache)
    finally:
        if owns_http:
            http.close()


def to_json(result: LookupResult) -> str:
    return result.to_json()
