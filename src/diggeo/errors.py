# src/diggeo/errors.py


class DiggeoError(Exception):
    """Base class for every error diggeo reports to the user."""

    kind = "Error"


class ConfigError(DiggeoError):
    kind = "ConfigError"


class ResolutionError(DiggeoError):
    kind = "ResolutionError"

    def __init__(self, domain: str, reason: str):
        super().__init__(f"could not resolve {domain}: {reason}")
        self.domain = domain
        self.reason = reason


class NetworkError(DiggeoError):
    kind = "NetworkError"

    def __init__(self, ip: str, reason: str):
        super().__init__(f"request for {ip} failed: {reason}")
        self.ip = ip
        self.reason = reason


class ApiError(DiggeoError):
    """
    The geolocation service answered with a non-success status.
    The response body is kept so the caller can show the provider's own message.
    """

    kind = "ApiError"

    def __init__(self, ip: str, status: int, body: str):
        super().__init__(f"geolocation service returned HTTP {status} for {ip}")
        self.ip = ip
        self.status = status
        self.body = body
