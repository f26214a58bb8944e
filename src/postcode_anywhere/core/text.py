from __future__ import annotations

import re

from postcode_anywhere.core.errors import InvalidPostcode


_WS = re.compile(r"\s+")
_UK_POSTCODE = re.compile(r"^(GIR0AA|[A-Z]{1,2}\d[A-Z\d]?\d[A-Z]{2})$")


def compact_postcode(raw: str | None) -> str:
    """' sw1a 1aa ' -> 'SW1A1AA'"""
    return _WS.sub("", raw or "").upper()


def is_valid_postcode(raw: str | None) -> bool:
    if not isinstance(raw, str):
        return False
    return bool(_UK_POSTCODE.match(compact_postcode(raw)))


def normalize_postcode(raw: str | None) -> str:
    """
    UK 우편번호를 'OUTWARD INWARD' 형태로 정규화합니다.
    예: 'sw1a1aa' -> 'SW1A 1AA'

    Raises InvalidPostcode if the input does not look like a UK postcode.
    """
    if not is_valid_postcode(raw):
        raise InvalidPostcode(str(raw))
    compact = compact_postcode(raw)
    return f"{compact[:-3]} {compact[-3:]}"
