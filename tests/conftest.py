# tests/conftest.py
import json
import logging

import httpx
import pytest

from diggeo.modules.geoip_lookup import GeoClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DIGGEO_CONFIG", "DIGGEO_API_URL", "DIGGEO_TIMEOUT", "DIGGEO_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "diggeo.conf"
    path.write_text("# test config\napi_key = test-key\n")
    return path


class FakeGeoService:
    """Answers like ipgeolocation.io; per-ip overrides go in `responses`."""

    def __init__(self):
        self.calls = []
        self.responses = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        ip = request.url.params["ip"]
        self.calls.append((request.url.params["apiKey"], ip))
        answer = self.responses.get(ip)
        if isinstance(answer, Exception):
            raise answer
        if answer is None:
            return httpx.Response(200, text=json.dumps({"ip": ip, "country_name": "Testland"}))
        status, body = answer
        return httpx.Response(status, text=body)

    def client(self, api_key="test-key", **kwargs):
        return GeoClient(api_key, transport=httpx.MockTransport(self.handler), **kwargs)


@pytest.fixture
def geo_service():
    return FakeGeoService()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("diggeo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
