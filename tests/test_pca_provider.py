from __future__ import annotations

import httpx
import pytest

from postcode_anywhere.core.errors import ConfigurationError, TransportError
from postcode_anywhere.infra.http import HttpClient
from postcode_anywhere.infra.providers.pca import (
    Credentials,
    PostcodeAnywhereProvider,
    build_url,
)


def _http(handler) -> HttpClient:
    return HttpClient(user_agent="test", transport=httpx.MockTransport(handler))


def _no_network(request: httpx.Request) -> httpx.Response:
    pytest.fail(f"unexpected request: {request.url}")


def test_build_url_template():
    url = build_url("RetrieveByParts", "1.00", {"Key": "AA11-BB22", "Postcode": "SW1A 1AA"})
    assert url == (
        "https://services.postcodeanywhere.co.uk/PostcodeAnywhere/Interactive/"
        "RetrieveByParts/1.00/json.ws?Key=AA11-BB22&Postcode=SW1A+1AA"
    )


@pytest.mark.parametrize("params", [{}, {"Key": ""}, {"Key": None, "Postcode": "SW1A 1AA"}])
def test_build_url_requires_key(params):
    with pytest.raises(ConfigurationError):
        build_url("RetrieveByParts", "1.00", params)


def test_username_is_sent_when_configured():
    provider = PostcodeAnywhereProvider(
        http=_http(_no_network), credentials=Credentials(key="K", username="ACME1")
    )
    url = httpx.URL(provider.url_for("SW1A 1AA"))
    assert url.params["UserName"] == "ACME1"
    assert url.path == "/PostcodeAnywhere/Interactive/RetrieveByParts/1.00/json.ws"


@pytest.mark.parametrize("creds", [None, Credentials(key="")])
def test_missing_key_fails_before_any_request(creds):
    provider = PostcodeAnywhereProvider(http=_http(_no_network), credentials=creds)
    with pytest.raises(ConfigurationError):
        provider.fetch("SW1A 1AA")


def test_fetch_returns_raw_body():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["Postcode"] == "SW1A 1AA"
        assert request.headers["User-Agent"] == "test"
        return httpx.Response(200, text='[{"Udprn": "1"}]')

    provider = PostcodeAnywhereProvider(http=_http(handler), credentials=Credentials(key="K"))
    assert provider.fetch("SW1A 1AA") == '[{"Udprn": "1"}]'


def test_connection_failure_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    provider = PostcodeAnywhereProvider(http=_http(handler), credentials=Credentials(key="K"))
    with pytest.raises(TransportError, match="Connection refused"):
        provider.fetch("SW1A 1AA")


def test_timeout_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        _http(handler).get_text("https://example.invalid/")


@pytest.mark.parametrize("status", [204, 301, 404, 500, 503])
def test_non_200_is_transport_error(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text="[]")

    with pytest.raises(TransportError):
        _http(handler).get_text("https://example.invalid/")


def test_empty_body_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="")

    with pytest.raises(TransportError, match="No content"):
        _http(handler).get_text("https://example.invalid/")


def test_status_error_message_has_no_url():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    provider = PostcodeAnywhereProvider(http=_http(handler), credentials=Credentials(key="SECRET"))
    with pytest.raises(TransportError) as exc:
        provider.fetch("SW1A 1AA")
    assert str(exc.value) == "HTTP 500 Internal Server Error"


def test_request_error_message_masks_url():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    provider = PostcodeAnywhereProvider(http=_http(handler), credentials=Credentials(key="SECRET"))
    with pytest.raises(TransportError) as exc:
        provider.fetch("SW1A 1AA")
    assert "SECRET" not in str(exc.value)
    assert str(exc.value) == "cannot reach <url>"
