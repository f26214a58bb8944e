from __future__ import annotations

from dataclasses import dataclass

from postcode_anywhere.app.settings import Settings, get_settings
from postcode_anywhere.core.freshness import FreshnessPolicy
from postcode_anywhere.infra.cache import CacheAdapter, MemoryCache
from postcode_anywhere.infra.http import HttpClient
from postcode_anywhere.infra.providers.pca import Credentials, PostcodeAnywhereProvider
from postcode_anywhere.infra.sqlite_cache import SqliteCache
from postcode_anywhere.services.postcode_service import PostcodeAddressService


@dataclass(frozen=True)
class Container:
    settings: Settings
    cache: CacheAdapter | None
    http: HttpClient
    pca: PostcodeAnywhereProvider
    postcode_service: PostcodeAddressService


def build_cache(settings: Settings) -> CacheAdapter | None:
    if settings.cache_backend == "none":
        return None
    if settings.cache_backend == "sqlite":
        return SqliteCache(settings.cache_path)
    return MemoryCache(
        maxsize=settings.cache_maxsize,
        ttl_seconds=settings.cache_ttl_seconds or None,
    )


def build_container(settings: Settings | None = None) -> Container:
    settings = settings or get_settings()

    # 잘못된 cutoff는 여기서 바로 ConfigurationError
    freshness = FreshnessPolicy()
    if settings.cache_cutoff:
        freshness = FreshnessPolicy.from_string(settings.cache_cutoff)

    cache = build_cache(settings)
    http = HttpClient(
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.http_user_agent,
        verify=settings.http_verify_tls,
    )

    credentials = None
    if settings.pca_key:
        credentials = Credentials(key=settings.pca_key, username=settings.pca_username)

    pca = PostcodeAnywhereProvider(
        http=http,
        credentials=credentials,
        endpoint=settings.pca_endpoint,
        version=settings.pca_version,
    )

    postcode_service = PostcodeAddressService(fetcher=pca, cache=cache, freshness=freshness)

    return Container(
        settings=settings,
        cache=cache,
        http=http,
        pca=pca,
        postcode_service=postcode_service,
    )
