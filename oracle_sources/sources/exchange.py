"""
Exchange Price Oracle Source

Resolves one price out of several symbol pairs served by a single
exchange-style endpoint. The URL is a template with '{}' markers that are
filled left to right: configured params first (e.g. API keys), then the
quote symbol, then the base symbol.

Example config:
    type: exchange
    name: cryptocompare
    url: https://min-api.cryptocompare.com/data/price?api_key={}&fsym={}&tsyms={}
    params: [<api key>]
    jsonpath: $..*
    decimal: 12
    bases: [USDT, BTC, ETH]
    quotes: [BTC, ETH, DOGE]

fetch(RequestParams(quote_index=2, base_index=0)) then queries
fsym=DOGE&tsyms=USDT.
"""

import logging
from typing import Optional, Sequence

import requests

from ..base import OracleSource, ParamsLike, RequestParams
from ..config import PLACEHOLDER, ExchangeConfig
from ..errors import IndexOutOfRange
from ..normalize import compile_path
from .pricing import fetch_price

logger = logging.getLogger(__name__)


class ExchangeSourceAdapter(OracleSource):
    """
    Oracle source for a templated multi-pair exchange endpoint.

    Immutable after construction; the template is validated up front so a
    malformed one never reaches the network.
    """

    def __init__(
        self,
        name: str,
        url: str,
        params: Sequence[str],
        jsonpath: str,
        decimal: int,
        bases: Sequence[str],
        quotes: Sequence[str],
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        config = ExchangeConfig(
            name=name,
            url=url,
            jsonpath=jsonpath,
            decimal=decimal,
            params=params,
            bases=bases,
            quotes=quotes,
        )
        super().__init__(config.name)
        self._config = config
        self._path = compile_path(config.jsonpath, source=config.name)
        self.timeout = timeout
        self.session = session

    @classmethod
    def from_config(cls, config: ExchangeConfig, **kwargs) -> 'ExchangeSourceAdapter':
        return cls(
            name=config.name,
            url=config.url,
            params=config.params,
            jsonpath=config.jsonpath,
            decimal=config.decimal,
            bases=config.bases,
            quotes=config.quotes,
            **kwargs,
        )

    @classmethod
    def from_dict(cls, data: dict, **kwargs) -> 'ExchangeSourceAdapter':
        return cls.from_config(ExchangeConfig.from_dict(data), **kwargs)

    @property
    def config(self) -> ExchangeConfig:
        return self._config

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def params(self):
        return self._config.params

    @property
    def jsonpath(self) -> str:
        return self._config.jsonpath

    @property
    def decimal(self) -> int:
        return self._config.decimal

    @property
    def bases(self):
        return self._config.bases

    @property
    def quotes(self):
        return self._config.quotes

    def _select(self, symbols, index: Optional[int], role: str) -> str:
        if index is None:
            raise IndexOutOfRange(f"missing {role} index", source=self.name)
        if not 0 <= index < len(symbols):
            raise IndexOutOfRange(
                f"{role} index {index} out of range for {len(symbols)} {role}s",
                source=self.name,
                details={'index': index, 'size': len(symbols)},
            )
        return symbols[index]

    def resolve_url(self, params: ParamsLike) -> str:
        """
        Fill the URL template for one request.

        Raises:
            IndexOutOfRange: quote or base index missing or out of bounds
        """
        request = RequestParams.coerce(params)
        quote = self._select(self.quotes, request.quote_index, 'quote')
        base = self._select(self.bases, request.base_index, 'base')

        # one value per '{}' slot, even when a value itself contains '{}'
        pieces = self.url.split(PLACEHOLDER)
        values = (*self.params, quote, base)
        url = pieces[0]
        for value, piece in zip(values, pieces[1:]):
            url += value + piece
        return url

    def fetch(self, params: ParamsLike = None) -> int:
        """Fetch the price of quotes[quote_index] in bases[base_index]."""
        try:
            url = self.resolve_url(params)
        except IndexOutOfRange as e:
            logger.warning(f"{self.name}: {e.message}")
            raise
        return fetch_price(
            url,
            self._path,
            self.decimal,
            source=self.name,
            timeout=self.timeout,
            session=self.session,
        )
