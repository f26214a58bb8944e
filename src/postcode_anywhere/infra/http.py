from __future__ import annotations

import logging
from typing import Any

import httpx

from postcode_anywhere.core.errors import TransportError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


def _describe(e: httpx.HTTPError) -> str:
    """
    Error text without the request URL: its query string carries the licence key.
    """
    if isinstance(e, httpx.HTTPStatusError):
        return f"HTTP {e.response.status_code} {e.response.reason_phrase}".strip()

    message = str(e)
    try:
        url = str(e.request.url)
    except RuntimeError:
        # request is not attached to every HTTPError
        url = ""
    if url and url in message:
        message = message.replace(url, "<url>")
    return message or type(e).__name__


class HttpClient:
    """
    Single-attempt GET client. No retries: a failure is reported to the caller.

    ``verify`` toggles TLS certificate verification, ``transport`` lets tests
    plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent},
            verify=verify,
            transport=transport,
        )

    def get_text(self, url: str, *, params: dict[str, Any] | None = None) -> str:
        try:
            r = self._client.get(url, params=params)
            r.raise_for_status()
        except httpx.HTTPError as e:
            message = _describe(e)
            log.warning("HTTP error: %s", message)
            raise TransportError(message) from e

        if r.status_code != 200:
            raise TransportError(f"Unexpected HTTP status {r.status_code}")

        content = r.text
        if not content:
            raise TransportError("No content")
        return content

    def close(self) -> None:
        try:
            self._client.close()
        except Exception:
            # close 실패는 무시(프로세스 종료 시점)
            pass

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
