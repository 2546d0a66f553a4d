# tests/test_geoip_lookup.py
import httpx
import pytest

from diggeo.errors import ApiError, ConfigError, NetworkError
from diggeo.modules.geoip_lookup import GeoClient


def test_success_returns_body_unmodified():
    body = '{"ip":"8.8.8.8","country_name":"United States"}\n'
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(200, text=body)

    with GeoClient("k3y", base_url="https://geo.test/ipgeo", transport=httpx.MockTransport(handler)) as client:
        assert client.lookup("8.8.8.8") == body

    assert seen["url"].host == "geo.test"
    assert seen["url"].path == "/ipgeo"
    assert seen["url"].params["apiKey"] == "k3y"
    assert seen["url"].params["ip"] == "8.8.8.8"


def test_error_status_raises_api_error_with_body():
    def handler(request):
        return httpx.Response(401, text='{"message":"Provided API key is not valid."}')

    client = GeoClient("bad", transport=httpx.MockTransport(handler))
    with pytest.raises(ApiError) as exc:
        client.lookup("1.1.1.1")
    assert exc.value.status == 401
    assert exc.value.ip == "1.1.1.1"
    assert "not valid" in exc.value.body


def test_connection_failure_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = GeoClient("k3y", transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError, match="connection refused"):
        client.lookup("1.1.1.1")


def test_timeout_raises_network_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = GeoClient("k3y", transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError):
        client.lookup("1.1.1.1")


@pytest.mark.parametrize("key", ["", "   "])
def test_empty_api_key_is_refused(key):
    with pytest.raises(ConfigError):
        GeoClient(key)
