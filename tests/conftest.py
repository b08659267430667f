"""
Shared pytest fixtures for oracle source tests.

HTTP is never hit from unit tests: fixtures build real requests.Response
objects that tests hand to a patched requests.get.
"""
import os
import pytest
import requests


@pytest.fixture
def make_response():
    """
    Factory for requests.Response objects with a given body and status.

    Usage:
        response = make_response('{"price": "100.5"}')
        with patch('requests.get', return_value=response): ...
    """
    def _make(body, status_code=200, encoding='utf-8', url='http://test.local/'):
        response = requests.Response()
        response.status_code = status_code
        response.url = url
        response.encoding = encoding
        response._content = body if isinstance(body, bytes) else body.encode('utf-8')
        return response

    return _make


@pytest.fixture
def live_sources_enabled():
    """Skip unless live upstream tests were requested."""
    if os.environ.get('ORACLE_LIVE_TESTS', '').lower() not in ('1', 'true', 'yes'):
        pytest.skip("set ORACLE_LIVE_TESTS=1 to query real exchanges")
    return True


@pytest.fixture(autouse=True)
def clean_oracle_env(monkeypatch):
    """Keep settings deterministic regardless of the caller's environment."""
    monkeypatch.delenv('ORACLE_HTTP_TIMEOUT', raising=False)
    monkeypatch.delenv('ORACLE_SOURCES_CONFIG', raising=False)
