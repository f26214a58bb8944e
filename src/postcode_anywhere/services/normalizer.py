from __future__ import annotations

import json
from typing import Any

from postcode_anywhere.core.errors import UpstreamDataError
from postcode_anywhere.core.models import AddressRecord

RESIDENTIAL = "Residential"


def _pick_str(v: Any) -> str:
    return "" if v is None else str(v)


def convert_address(item: dict[str, Any]) -> AddressRecord:
    # exact, case-sensitive match only
    residential = item.get("Type") == RESIDENTIAL
    company = item.get("Company")
    return AddressRecord(
        residential=residential,
        name=None if residential or company is None else _pick_str(company),
        line1=_pick_str(item.get("Line1")),
        line2=_pick_str(item.get("Line2")),
        street=_pick_str(item.get("PrimaryStreet")),
        town=_pick_str(item.get("PostTown")),
        county=_pick_str(item.get("County")),
        country=_pick_str(item.get("CountryName")),
        postcode=_pick_str(item.get("Postcode")),
        id=_pick_str(item.get("Udprn")),
    )


def convert_addresses(items: list[dict[str, Any]]) -> list[AddressRecord]:
    """Map PCA address objects to AddressRecords, keeping input order."""
    return [convert_address(item) for item in items]


def is_error_sentinel(payload: Any) -> bool:
    """PCA reports 'nothing found' as a one-element array carrying an Error field."""
    return (
        isinstance(payload, list)
        and len(payload) == 1
        and isinstance(payload[0], dict)
        and "Error" in payload[0]
    )


def normalize(raw: str | bytes) -> list[AddressRecord]:
    """
    PCA 응답 본문을 AddressRecord 리스트로 정규화합니다.

    Raises UpstreamDataError when the body is not JSON, is not a JSON array,
    or is the vendor's Error sentinel. An empty array is a valid, empty
    result.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise UpstreamDataError(f"Unparsable address payload: {e}") from e

    if is_error_sentinel(payload):
        detail = payload[0].get("Description") or payload[0].get("Error")
        raise UpstreamDataError(f"PCA error: {detail}")

    if not isinstance(payload, list):
        raise UpstreamDataError("Address payload is not a JSON array")

    items = [item for item in payload if isinstance(item, dict)]
    if len(items) != len(payload):
        raise UpstreamDataError("Address payload contains non-object entries")

    return convert_addresses(items)
