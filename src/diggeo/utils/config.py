# src/diggeo/utils/config.py
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from diggeo.errors import ConfigError

DEFAULT_CONFIG_PATH = "/etc/diggeo.conf"
DEFAULT_API_URL = "https://api.ipgeolocation.io/ipgeo"
DEFAULT_TIMEOUT = 10.0
API_KEY_NAME = "api_key"


class ConfigSource(Protocol):
    """Anything that can hand back a configuration value by name."""

    def get(self, name: str) -> Optional[str]:
        ...


def parse_config_text(text: str) -> Dict[str, str]:
    """
    Parse `key = value` lines.
      - anything after '#' is a comment
      - blank lines and lines without '=' are skipped
      - the first non-empty value for a key wins
    """
    values: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key and value and key not in values:
            values[key] = value
    return values


class FileConfigSource:
    """Reads a config file on first access and caches the parsed values."""

    def __init__(self, path: str | Path = DEFAULT_CONFIG_PATH):
        self.path = Path(path)
        self._values: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._values is None:
            try:
                text = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                raise ConfigError(f"config file not found: {self.path}")
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigError(f"failed to read config {self.path}: {e}")
            self._values = parse_config_text(text)
        return self._values

    def get(self, name: str) -> Optional[str]:
        return self._load().get(name)

    def __repr__(self):
        return f"FileConfigSource({str(self.path)!r})"


class MappingConfigSource:
    """In-memory source, handy for tests and for values built at runtime."""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)

    def get(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        if value is None:
            return None
        return value.strip()


def load_api_key(source: ConfigSource) -> str:
    key = source.get(API_KEY_NAME)
    if not key:
        raise ConfigError(f"{API_KEY_NAME} not found in {source!r}")
    return key


def resolve_config_path(cli_path: str | None = None) -> Path:
    """--config wins, then DIGGEO_CONFIG, then the system default."""
    return Path(cli_path or os.getenv("DIGGEO_CONFIG") or DEFAULT_CONFIG_PATH)


def api_url() -> str:
    return os.getenv("DIGGEO_API_URL") or DEFAULT_API_URL


def request_timeout(cli_timeout: float | None = None) -> float:
    if cli_timeout is not None:
        value = cli_timeout
    else:
        raw = os.getenv("DIGGEO_TIMEOUT")
        if not raw:
            return DEFAULT_TIMEOUT
        try:
            value = float(raw)
        except ValueError:
            raise ConfigError(f"DIGGEO_TIMEOUT must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"timeout must be positive, got {value}")
    return value
