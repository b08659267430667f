"""
Custom Price Oracle Source

Reads one price from a single fixed URL. No templating; request params
are ignored.

Example config:
    type: custom
    name: btc-eth
    url: https://min-api.cryptocompare.com/data/price?fsym=BTC&tsyms=ETH
    jsonpath: $.ETH
    decimal: 12
"""

import logging
from typing import Optional

import requests

from ..base import OracleSource, ParamsLike
from ..config import CustomConfig
from ..normalize import compile_path
from .pricing import fetch_price

logger = logging.getLogger(__name__)


class CustomSourceAdapter(OracleSource):
    """Oracle source for a single pre-resolved HTTP/JSON endpoint."""

    def __init__(
        self,
        url: str,
        jsonpath: str,
        decimal: int,
        name: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        config = CustomConfig(url=url, jsonpath=jsonpath, decimal=decimal, name=name)
        super().__init__(config.name or config.url)
        self._config = config
        self._path = compile_path(config.jsonpath, source=self.name)
        self.timeout = timeout
        self.session = session

    @classmethod
    def from_config(cls, config: CustomConfig, **kwargs) -> 'CustomSourceAdapter':
        return cls(
            url=config.url,
            jsonpath=config.jsonpath,
            decimal=config.decimal,
            name=config.name,
            **kwargs,
        )

    @classmethod
    def from_dict(cls, data: dict, **kwargs) -> 'CustomSourceAdapter':
        return cls.from_config(CustomConfig.from_dict(data), **kwargs)

    @property
    def config(self) -> CustomConfig:
        return self._config

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def jsonpath(self) -> str:
        return self._config.jsonpath

    @property
    def decimal(self) -> int:
        return self._config.decimal

    def fetch(self, params: ParamsLike = None) -> int:
        """Fetch the price at the configured URL."""
        return fetch_price(
            self.url,
            self._path,
            self.decimal,
            source=self.name,
            timeout=self.timeout,
            session=self.session,
        )
