"""
Unit Tests for oracle sources

Tests for the exchange and custom price sources with mocked HTTP.
"""

import pytest
from unittest.mock import Mock, patch
import requests

from oracle_sources import (
    ConfigError,
    CustomSourceAdapter,
    DataNotFound,
    ExchangeSourceAdapter,
    IndexOutOfRange,
    NumericFormatError,
    ParseError,
    RequestParams,
    TransportError,
    TransportTimeoutError,
)


CRYPTOCOMPARE_URL = 'https://min-api.cryptocompare.com/data/price?api_key={}&fsym={}&tsyms={}'
SYMBOLS = ['BTC', 'ETH', 'USDT', 'USDC', 'BNB', 'XRP', 'BUSD']


# =============================================================================
# CustomSourceAdapter Tests
# =============================================================================

class TestCustomSource:
    """Tests for the fixed-URL price source."""

    @pytest.fixture
    def adapter(self):
        return CustomSourceAdapter(
            url='http://test.local/price',
            jsonpath='$.price',
            decimal=2,
        )

    def test_init(self, adapter):
        """Test custom source initialization."""
        assert adapter.url == 'http://test.local/price'
        assert adapter.jsonpath == '$.price'
        assert adapter.decimal == 2
        assert adapter.name == 'http://test.local/price'

    def test_init_named(self):
        adapter = CustomSourceAdapter(
            url='http://test.local/price', jsonpath='$.price', decimal=12, name='eth-btc')
        assert adapter.name == 'eth-btc'
        assert adapter.decimal == 12

    def test_fetch_numeric(self, adapter, make_response):
        """Numeric JSON value is scaled and floored."""
        with patch('requests.get', return_value=make_response('{"price": 100.5}')) as get:
            value = adapter.fetch()

        assert value == 10050
        get.assert_called_once_with('http://test.local/price', timeout=30)

    def test_fetch_string(self, adapter, make_response):
        """String-encoded numbers take the same path."""
        with patch('requests.get', return_value=make_response('{"price": "100.50"}')):
            value = adapter.fetch()

        assert value == 10050

    def test_fetch_floors(self, adapter, make_response):
        with patch('requests.get', return_value=make_response('{"price": "1.239"}')):
            assert adapter.fetch() == 123

    def test_fetch_exact_for_large_exponent(self, make_response):
        """No binary floating point drift at high decimals."""
        adapter = CustomSourceAdapter(
            url='http://test.local/price', jsonpath='$.price', decimal=18)
        with patch('requests.get', return_value=make_response('{"price": 0.1}')):
            assert adapter.fetch() == 10 ** 17

    def test_params_ignored(self, adapter, make_response):
        with patch('requests.get', return_value=make_response('{"price": 1}')):
            assert adapter.fetch([9, 9, 9]) == 100
            assert adapter.fetch(RequestParams()) == 100

    def test_idempotent(self, adapter, make_response):
        """Two fetches against the same response give the same value."""
        response = make_response('{"price": "42.4242"}')
        with patch('requests.get', return_value=response) as get:
            first = adapter.fetch()
            second = adapter.fetch()

        assert first == second == 4242
        assert get.call_count == 2

    def test_not_json(self, adapter, make_response):
        with patch('requests.get', return_value=make_response('not json')):
            with pytest.raises(ParseError):
                adapter.fetch()

    def test_missing_path(self, adapter, make_response):
        with patch('requests.get', return_value=make_response('{"last": 5}')):
            with pytest.raises(DataNotFound):
                adapter.fetch()

    def test_empty_array_is_data_not_found(self, make_response):
        adapter = CustomSourceAdapter(
            url='http://test.local/price', jsonpath='$.prices[*]', decimal=0)
        with patch('requests.get', return_value=make_response('{"prices": []}')):
            with pytest.raises(DataNotFound):
                adapter.fetch()

    @pytest.mark.parametrize('body', [
        '{"price": "abc"}',
        '{"price": true}',
        '{"price": {"value": 1}}',
        '{"price": -3.5}',
        '{"price": "NaN"}',
        '{"price": Infinity}',
    ])
    def test_bad_numbers(self, adapter, make_response, body):
        with patch('requests.get', return_value=make_response(body)):
            with pytest.raises(NumericFormatError):
                adapter.fetch()

    def test_huge_exponent_string(self, adapter, make_response):
        with patch('requests.get', return_value=make_response('{"price": "1e999999999"}')):
            with pytest.raises(NumericFormatError):
                adapter.fetch()

    def test_default_timeout_from_env(self, adapter, make_response, monkeypatch):
        monkeypatch.setenv('ORACLE_HTTP_TIMEOUT', '4')
        with patch('requests.get', return_value=make_response('{"price": 1}')) as get:
            adapter.fetch()

        get.assert_called_once_with('http://test.local/price', timeout=4.0)

    def test_connection_error(self, adapter):
        with patch('requests.get', side_effect=requests.ConnectionError("Connection refused")):
            with pytest.raises(TransportError) as exc:
                adapter.fetch()

        assert not isinstance(exc.value, TransportTimeoutError)
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    def test_timeout(self, adapter):
        with patch('requests.get', side_effect=requests.Timeout("read timed out")):
            with pytest.raises(TransportTimeoutError):
                adapter.fetch()

    def test_http_error_status(self, adapter, make_response):
        with patch('requests.get', return_value=make_response('{"price": 1}', status_code=502)):
            with pytest.raises(TransportError):
                adapter.fetch()

    def test_undecodable_body(self, adapter, make_response):
        with patch('requests.get', return_value=make_response(b'\xff\xfe\xfa', encoding='utf-8')):
            with pytest.raises(TransportError):
                adapter.fetch()

    def test_session_and_timeout(self, make_response):
        session = Mock()
        session.get = Mock(return_value=make_response('{"price": "7"}'))
        adapter = CustomSourceAdapter(
            url='http://test.local/price', jsonpath='$.price', decimal=0,
            timeout=2.5, session=session)

        assert adapter.fetch() == 7
        session.get.assert_called_once_with('http://test.local/price', timeout=2.5)

    def test_negative_decimal_rejected(self):
        with pytest.raises(ConfigError):
            CustomSourceAdapter(url='http://test.local', jsonpath='$.price', decimal=-1)

    def test_invalid_jsonpath_rejected(self):
        with pytest.raises(ConfigError):
            CustomSourceAdapter(url='http://test.local', jsonpath='$.[', decimal=0)

    def test_from_dict(self):
        adapter = CustomSourceAdapter.from_dict({
            'url': 'http://test.local/price',
            'jsonpath': '$.data.price',
            'decimal': 6,
        })
        assert adapter.jsonpath == '$.data.price'
        assert adapter.decimal == 6


# =============================================================================
# ExchangeSourceAdapter Tests
# =============================================================================

class TestExchangeSource:
    """Tests for the templated multi-pair exchange source."""

    @pytest.fixture
    def binance(self):
        return ExchangeSourceAdapter(
            name='binance',
            url='https://data.binance.com/api/v3/ticker/price?symbol={}{}',
            params=[],
            jsonpath='$.price',
            decimal=0,
            bases=['USDT'],
            quotes=['BTC'],
        )

    @pytest.fixture
    def cryptocompare(self):
        return ExchangeSourceAdapter(
            name='cryptocompare',
            url=CRYPTOCOMPARE_URL,
            params=['secret-key'],
            jsonpath='$..*',
            decimal=12,
            bases=SYMBOLS,
            quotes=SYMBOLS + ['DOGE', 'ADA', 'MATIC'],
        )

    def test_init(self, cryptocompare):
        """Test exchange source initialization."""
        assert cryptocompare.name == 'cryptocompare'
        assert cryptocompare.params == ('secret-key',)
        assert len(cryptocompare.quotes) == 10
        assert cryptocompare.decimal == 12

    def test_fetch_string_price(self, binance, make_response):
        response = make_response('{"symbol": "BTCUSDT", "price": "50000"}')
        with patch('requests.get', return_value=response) as get:
            value = binance.fetch([0, 0])

        assert value == 50000
        get.assert_called_once_with(
            'https://data.binance.com/api/v3/ticker/price?symbol=BTCUSDT', timeout=30)

    def test_resolve_url_order(self, cryptocompare):
        """Params first, then quote, then base."""
        url = cryptocompare.resolve_url(RequestParams(quote_index=7, base_index=2))
        assert url == (
            'https://min-api.cryptocompare.com/data/price'
            '?api_key=secret-key&fsym=DOGE&tsyms=USDT'
        )

    def test_resolve_url_from_bytes(self, cryptocompare):
        url = cryptocompare.resolve_url(bytes([1, 0]))
        assert url.endswith('fsym=ETH&tsyms=BTC')

    def test_value_containing_placeholder(self):
        adapter = ExchangeSourceAdapter(
            name='odd', url='http://x/{}/{}/{}', params=['a{}b'], jsonpath='$.p',
            decimal=0, bases=['USD'], quotes=['BTC'])
        assert adapter.resolve_url([0, 0]) == 'http://x/a{}b/BTC/USD'

    def test_wildcard_path(self, cryptocompare, make_response):
        with patch('requests.get', return_value=make_response('{"USDT": 16.5}')):
            value = cryptocompare.fetch(RequestParams(quote_index=1, base_index=2))

        assert value == 16_500_000_000_000

    def test_nested_path(self, make_response):
        kucoin = ExchangeSourceAdapter(
            name='kucoin',
            url='https://openapi-sandbox.kucoin.com/api/v1/market/orderbook/level1?symbol={}-{}',
            params=[],
            jsonpath='$.data.price',
            decimal=12,
            bases=['USDT'],
            quotes=['BTC'],
        )
        body = '{"code": "200000", "data": {"price": "27123.4"}}'
        with patch('requests.get', return_value=make_response(body)) as get:
            value = kucoin.fetch([0, 0])

        assert value == 27_123_400_000_000_000
        assert get.call_args[0][0].endswith('symbol=BTC-USDT')

    @pytest.mark.parametrize('params', [[5, 0], [0, 1], [0], [], None, RequestParams(quote_index=1)])
    def test_index_out_of_range_before_network(self, binance, params):
        """Bad indices fail fast without any HTTP call."""
        with patch('requests.get') as get:
            with pytest.raises(IndexOutOfRange):
                binance.fetch(params)

        get.assert_not_called()

    def test_negative_index(self, binance):
        with patch('requests.get') as get:
            with pytest.raises(IndexOutOfRange):
                binance.fetch([-1, 0])
        get.assert_not_called()

    def test_not_json(self, binance, make_response):
        with patch('requests.get', return_value=make_response('not json')):
            with pytest.raises(ParseError):
                binance.fetch([0, 0])

    def test_no_match(self, binance, make_response):
        body = '{"code": -1121, "msg": "Invalid symbol."}'
        with patch('requests.get', return_value=make_response(body)):
            with pytest.raises(DataNotFound):
                binance.fetch([0, 0])

    def test_idempotent(self, binance, make_response):
        response = make_response('{"price": "50000.12"}')
        with patch('requests.get', return_value=response):
            assert binance.fetch([0, 0]) == binance.fetch([0, 0]) == 50000

    @pytest.mark.parametrize('url,params', [
        ('http://x/?symbol={}', []),
        ('http://x/?symbol={}{}{}', []),
        ('http://x/?key={}&symbol={}{}', []),
        (CRYPTOCOMPARE_URL, ['k1', 'k2']),
    ])
    def test_malformed_template(self, url, params):
        with pytest.raises(ConfigError):
            ExchangeSourceAdapter(
                name='bad', url=url, params=params, jsonpath='$.price',
                decimal=0, bases=['USDT'], quotes=['BTC'])

    def test_from_dict(self):
        adapter = ExchangeSourceAdapter.from_dict({
            'name': 'mexc',
            'url': 'https://api.mexc.com/api/v3/avgPrice?symbol={}{}',
            'params': [],
            'jsonpath': '$.price',
            'decimal': 12,
            'bases': ['USDT'],
            'quotes': ['BTC'],
        }, timeout=5)

        assert adapter.name == 'mexc'
        assert adapter.timeout == 5
        assert adapter.config.to_dict()['quotes'] == ['BTC']

    def test_from_dict_missing_field(self):
        with pytest.raises(ConfigError):
            ExchangeSourceAdapter.from_dict({
                'name': 'mexc',
                'url': 'https://api.mexc.com/api/v3/avgPrice?symbol={}{}',
                'jsonpath': '$.price',
                'bases': ['USDT'],
                'quotes': ['BTC'],
            })

    def test_immutable_config(self, binance):
        with pytest.raises(AttributeError):
            binance.config.decimal = 5
