"""
Configuration for oracle sources.

Two layers:
    - Settings: process-wide knobs read from environment variables
    - ExchangeConfig / CustomConfig: validated per-source records, usually
      loaded from a YAML (or JSON) source list

Example sources.yaml:
    sources:
      - type: time
        name: time
      - type: exchange
        name: binance
        url: https://data.binance.com/api/v3/ticker/price?symbol={}{}
        params: []
        jsonpath: $.price
        decimal: 12
        bases: [USDT]
        quotes: [BTC]
      - type: custom
        name: eth-btc
        url: https://min-api.cryptocompare.com/data/price?fsym=BTC&tsyms=ETH
        jsonpath: $.ETH
        decimal: 12

A bare list of exchange records (no `sources` key) is accepted as well.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

PLACEHOLDER = '{}'

DEFAULT_HTTP_TIMEOUT = 30.0


def _require_str(data: dict, key: str, source: Optional[str]) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string", source=source)
    return value


def _require_decimal(value: Any, source: Optional[str]) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(
            f"'decimal' must be a non-negative integer, got {value!r}", source=source)
    return value


def _require_str_list(value: Any, key: str, source: Optional[str]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{key}' must be a list of strings", source=source)
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"'{key}' contains non-string {item!r}", source=source)
    return tuple(value)


@dataclass(frozen=True)
class ExchangeConfig:
    """Configuration for a templated multi-pair exchange source."""

    name: str
    url: str                                # Template with '{}' markers
    jsonpath: str                           # Locates the price in the response
    decimal: int                            # Scaling exponent
    params: Tuple[str, ...] = ()            # Substituted first (e.g. API keys)
    bases: Tuple[str, ...] = ()
    quotes: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ConfigError("'name' must be a non-empty string")
        if not isinstance(self.url, str) or not self.url:
            raise ConfigError("'url' must be a non-empty string", source=self.name)
        _require_decimal(self.decimal, self.name)
        object.__setattr__(self, 'params', _require_str_list(self.params, 'params', self.name))
        object.__setattr__(self, 'bases', _require_str_list(self.bases, 'bases', self.name))
        object.__setattr__(self, 'quotes', _require_str_list(self.quotes, 'quotes', self.name))

        expected = len(self.params) + 2
        found = self.url.count(PLACEHOLDER)
        if found != expected:
            raise ConfigError(
                f"url template has {found} placeholders, expected {expected} "
                f"({len(self.params)} params + quote + base)",
                source=self.name,
                details={'url': self.url},
            )

    @classmethod
    def from_dict(cls, data: dict) -> 'ExchangeConfig':
        """Create config from dictionary."""
        if not isinstance(data, dict):
            raise ConfigError(f"exchange record must be a mapping, got {type(data).__name__}")
        name = _require_str(data, 'name', None)
        if 'decimal' not in data:
            raise ConfigError("'decimal' is required", source=name)
        return cls(
            name=name,
            url=_require_str(data, 'url', name),
            jsonpath=_require_str(data, 'jsonpath', name),
            decimal=data['decimal'],
            params=data.get('params', []),
            bases=data.get('bases', []),
            quotes=data.get('quotes', []),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'url': self.url,
            'params': list(self.params),
            'jsonpath': self.jsonpath,
            'decimal': self.decimal,
            'bases': list(self.bases),
            'quotes': list(self.quotes),
        }


@dataclass(frozen=True)
class CustomConfig:
    """Configuration for a single fixed-URL source."""

    url: str
    jsonpath: str
    decimal: int
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url:
            raise ConfigError("'url' must be a non-empty string", source=self.name)
        _require_decimal(self.decimal, self.name or self.url)

    @classmethod
    def from_dict(cls, data: dict) -> 'CustomConfig':
        """Create config from dictionary."""
        if not isinstance(data, dict):
            raise ConfigError(f"custom record must be a mapping, got {type(data).__name__}")
        name = data.get('name')
        url = _require_str(data, 'url', name)
        if 'decimal' not in data:
            raise ConfigError("'decimal' is required", source=name or url)
        return cls(
            url=url,
            jsonpath=_require_str(data, 'jsonpath', name or url),
            decimal=data['decimal'],
            name=name,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {'url': self.url, 'jsonpath': self.jsonpath, 'decimal': self.decimal}
        if self.name:
            data['name'] = self.name
        return data


@dataclass
class Settings:
    """Process-wide settings."""

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    config_path: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'Settings':
        """
        Read settings from the environment.

        ORACLE_HTTP_TIMEOUT: per-request timeout in seconds
        ORACLE_SOURCES_CONFIG: path to the source list
        """
        raw_timeout = os.environ.get('ORACLE_HTTP_TIMEOUT')
        timeout = DEFAULT_HTTP_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(f"ORACLE_HTTP_TIMEOUT is not a number: {raw_timeout!r}") from e
            if timeout <= 0:
                raise ConfigError(f"ORACLE_HTTP_TIMEOUT must be positive, got {timeout}")
        return cls(
            http_timeout=timeout,
            config_path=os.environ.get('ORACLE_SOURCES_CONFIG') or None,
        )


def find_config(settings: Optional[Settings] = None) -> str:
    """Find the source list file."""
    if settings and settings.config_path:
        return settings.config_path
    paths = [
        os.path.expanduser('~/.oracle/sources.yaml'),
        'sources.yaml',
        'sources.json',
    ]
    for path in paths:
        if os.path.exists(path):
            return path
    return paths[0]  # Default to first path


def load_records(path: str) -> List[dict]:
    """
    Load source records from a YAML or JSON file.

    Returns:
        List of record dicts. Records from a bare list default to the
        'exchange' type.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read source list {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"source list {path} is not valid YAML/JSON: {e}") from e

    records = parse_records(data)
    logger.info(f"Loaded {len(records)} source records from {path}")
    return records


def parse_records(data: Any) -> List[dict]:
    """Normalize an already-decoded source list into typed records."""
    if data is None:
        return []
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict):
        records = data.get('sources') or []
        if not isinstance(records, list):
            raise ConfigError("'sources' must be a list")
    else:
        raise ConfigError(f"source list must be a list or mapping, got {type(data).__name__}")

    typed = []
    for record in records:
        if not isinstance(record, dict):
            raise ConfigError(f"source record must be a mapping, got {type(record).__name__}")
        typed.append({'type': 'exchange', **record})
    return typed
