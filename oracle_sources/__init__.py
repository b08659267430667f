"""
oracle-sources: fixed-point oracle values from time, randomness and price feeds

Every source exposes one blocking operation, fetch(params), which returns
an unsigned 256-bit integer or raises an OracleError subclass.

Usage:
    from oracle_sources import ExchangeSourceAdapter, RequestParams

    binance = ExchangeSourceAdapter(
        name='binance',
        url='https://data.binance.com/api/v3/ticker/price?symbol={}{}',
        params=[],
        jsonpath='$.price',
        decimal=12,
        bases=['USDT'],
        quotes=['BTC'],
    )
    price = binance.fetch(RequestParams(quote_index=0, base_index=0))

Components:
    - OracleSource: Base class for all sources
    - Built-in sources: time, rng, exchange, custom
    - SourceRegistry: Builds sources from a YAML/JSON source list
"""

from .base import OracleSource, RequestParams, U256_MAX
from .config import CustomConfig, ExchangeConfig, Settings
from .errors import (
    ClockError,
    ConfigError,
    DataNotFound,
    IndexOutOfRange,
    NumericFormatError,
    OracleError,
    ParseError,
    RandomnessError,
    TransportError,
    TransportTimeoutError,
)
from .registry import SourceRegistry
from .sources import (
    CustomSourceAdapter,
    ExchangeSourceAdapter,
    RngSourceAdapter,
    TimeSourceAdapter,
)

__version__ = "1.0.0"
__all__ = [
    "OracleSource",
    "RequestParams",
    "U256_MAX",
    "CustomConfig",
    "ExchangeConfig",
    "Settings",
    "SourceRegistry",
    "TimeSourceAdapter",
    "RngSourceAdapter",
    "ExchangeSourceAdapter",
    "CustomSourceAdapter",
    "OracleError",
    "ClockError",
    "RandomnessError",
    "TransportError",
    "TransportTimeoutError",
    "ParseError",
    "DataNotFound",
    "NumericFormatError",
    "IndexOutOfRange",
    "ConfigError",
]
