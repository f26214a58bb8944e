from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from postcode_anywhere.core.errors import ConfigurationError
from postcode_anywhere.infra.http import HttpClient

log = logging.getLogger(__name__)

PCA_API_URL = (
    "https://services.postcodeanywhere.co.uk/PostcodeAnywhere/Interactive/"
    "{endpoint}/{version}/json.ws?{query}"
)
DEFAULT_ENDPOINT = "RetrieveByParts"
DEFAULT_VERSION = "1.00"


@dataclass(frozen=True)
class Credentials:
    key: str
    username: str | None = None  # PCA account code, sent as UserName when set


def build_url(endpoint: str, version: str, params: dict[str, Any]) -> str:
    """
    Postcode Anywhere 요청 URL을 만듭니다.

    Raises ConfigurationError when no licence ``Key`` is present, before any
    network I/O happens.
    """
    if not params.get("Key"):
        raise ConfigurationError("Address API lookup licence not available")

    query = urlencode({k: v for k, v in params.items() if v is not None})
    return PCA_API_URL.format(endpoint=endpoint, version=version, query=query)


class PostcodeAnywhereProvider:
    """
    Remote lookup against the PCA ``RetrieveByParts`` service.

    ``fetch`` returns the raw response body; parsing belongs to the
    normalizer. Transport failures surface as TransportError from the
    HttpClient.
    """

    def __init__(
        self,
        *,
        http: HttpClient,
        credentials: Credentials | None,
        endpoint: str = DEFAULT_ENDPOINT,
        version: str = DEFAULT_VERSION,
    ) -> None:
        self._http = http
        self._credentials = credentials
        self._endpoint = endpoint
        self._version = version

    def url_for(self, postcode: str) -> str:
        creds = self._credentials
        if creds is None or not creds.key:
            raise ConfigurationError("Address API lookup licence not available")

        params: dict[str, Any] = {"Key": creds.key, "Postcode": postcode}
        if creds.username:
            params["UserName"] = creds.username
        return build_url(self._endpoint, self._version, params)

    def fetch(self, postcode: str) -> str:
        url = self.url_for(postcode)
        log.debug("PCA lookup for postcode: %s", postcode)
        return self._http.get_text(url)
