# src/diggeo/modules/geoip_lookup.py
import httpx

from diggeo.errors import ApiError, ConfigError, NetworkError
from diggeo.utils.config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from diggeo.utils.logger_manager import get_logger

logger = get_logger()


class GeoClient:
    """
    Thin client for the ipgeolocation.io lookup endpoint.
    One GET per IP, no retries. The body is returned as-is.
    The wrapped httpx.Client is safe to share between worker threads.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigError("API key is empty")
        self._api_key = api_key.strip()
        self.base_url = base_url
        self._client = httpx.Client(
            timeout=timeout,
            headers={"User-Agent": "diggeo"},
            transport=transport,
        )

    def lookup(self, ip: str) -> str:
        """Query the service for `ip` and return the response text."""
        logger.debug(f"[GEO] GET {self.base_url} ip={ip}")
        try:
            resp = self._client.get(self.base_url, params={"apiKey": self._api_key, "ip": ip})
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(ip, e.response.status_code, e.response.text) from e
        except httpx.RequestError as e:
            raise NetworkError(ip, str(e) or type(e).__name__) from e

        logger.debug(f"[GEO] {ip} -> HTTP {resp.status_code}, {len(resp.content)} bytes")
        return resp.text

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
