"""Shared test fixtures: PCA payloads and recording fakes for cache and fetcher."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from postcode_anywhere.core.errors import TransportError
from postcode_anywhere.core.models import CacheEntry

PCA_ADDRESSES = [
    {
        "Udprn": "23747771",
        "Company": "",
        "Department": "",
        "Line1": "Buckingham Palace",
        "Line2": "",
        "PrimaryStreet": "",
        "PostTown": "London",
        "County": "",
        "Postcode": "SW1A 1AA",
        "CountryName": "England",
        "Type": "Residential",
    },
    {
        "Udprn": 52357191,
        "Company": "The Royal Household",
        "Line1": "Buckingham Palace Road",
        "Line2": "Victoria",
        "PrimaryStreet": "Buckingham Palace Road",
        "PostTown": "London",
        "County": "Greater London",
        "Postcode": "SW1A 1AA",
        "CountryName": "England",
        "Type": "Organisation",
    },
]


class FakeFetcher:
    def __init__(self, body: str | None = None, error: Exception | None = None) -> None:
        self.body = body
        self.error = error
        self.calls: list[str] = []

    def fetch(self, postcode: str) -> str:
        self.calls.append(postcode)
        if self.error is not None:
            raise self.error
        return self.body


class FakeCache:
    def __init__(self, created: datetime | None = None, fail_writes: bool = False) -> None:
        self.rows: dict[str, CacheEntry] = {}
        self.created = created or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.fail_writes = fail_writes
        self.finds: list[tuple[str, str, str]] = []
        self.upserts: list[tuple[str, str]] = []

    def find(self, table: str, key: str, key_column: str) -> CacheEntry | None:
        self.finds.append((table, key, key_column))
        return self.rows.get(key)

    def upsert(self, key: str, content: str) -> None:
        self.upserts.append((key, content))
        if self.fail_writes:
            raise RuntimeError("disk full")
        self.rows[key] = CacheEntry(postcode=key, content=content, created=self.created)

    def seed(self, key: str, content: str, created: datetime) -> None:
        self.rows[key] = CacheEntry(postcode=key, content=content, created=created)


@pytest.fixture()
def pca_body() -> str:
    return json.dumps(PCA_ADDRESSES)


@pytest.fixture()
def fetcher(pca_body: str) -> FakeFetcher:
    return FakeFetcher(body=pca_body)


@pytest.fixture()
def failing_fetcher() -> FakeFetcher:
    return FakeFetcher(error=TransportError("Connection refused"))


@pytest.fixture()
def cache() -> FakeCache:
    return FakeCache()
