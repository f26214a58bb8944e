from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

SOURCE_CACHE = "cache"
SOURCE_API = "api"

Source = Literal["cache", "api"]

ERROR_INVALID_POSTCODE = "Invalid Postcode"
ERROR_LOOKUP_FAIL = "Address lookup fail"
ERROR_NO_ADDRESSES = "Problem fetching Postcode addresses"


@dataclass(frozen=True)
class AddressRecord:
    residential: bool
    name: str | None  # organisation name, only for non-residential
    line1: str
    line2: str
    street: str
    town: str
    county: str
    country: str
    postcode: str
    id: str  # delivery point id (UDPRN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "residential": self.residential,
            "name": self.name,
            "line1": self.line1,
            "line2": self.line2,
            "street": self.street,
            "town": self.town,
            "county": self.county,
            "country": self.country,
            "postcode": self.postcode,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AddressRecord:
        return cls(
            residential=bool(d.get("residential")),
            name=d.get("name"),
            line1=d.get("line1") or "",
            line2=d.get("line2") or "",
            street=d.get("street") or "",
            town=d.get("town") or "",
            county=d.get("county") or "",
            country=d.get("country") or "",
            postcode=d.get("postcode") or "",
            id=str(d.get("id") or ""),
        )


def dump_records(records: list[AddressRecord]) -> str:
    """Serialise records to the JSON content stored in a cache row."""
    return json.dumps([r.to_dict() for r in records])


def load_records(content: str) -> list[AddressRecord]:
    """
    Inverse of dump_records.

    Raises ValueError (json.JSONDecodeError included) when the content is
    not a JSON array of objects.
    """
    raw = json.loads(content)
    if not isinstance(raw, list) or not all(isinstance(r, dict) for r in raw):
        raise ValueError("cached content is not a list of address objects")
    return [AddressRecord.from_dict(r) for r in raw]


@dataclass(frozen=True)
class CacheEntry:
    postcode: str
    content: str
    created: datetime


@dataclass(frozen=True)
class LookupResult:
    postcode: str
    error: bool | str
    source: Source
    data: list[AddressRecord] | None = None
    error_detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "postcode": self.postcode,
            "error": self.error,
        }
        if self.error_detail is not None:
            d["errorDetail"] = self.error_detail
        d["source"] = self.source
        d["data"] = None if self.data is None else [r.to_dict() for r in self.data]
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
