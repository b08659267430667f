"""
Blocking HTTP transport for oracle sources.

A thin wrapper around requests that enforces a per-call timeout and maps
every failure onto the oracle error taxonomy.
"""

import logging
from typing import Optional

import requests

from .config import Settings
from .errors import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)


def http_get(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
    source: Optional[str] = None,
) -> str:
    """
    GET a URL and return the decoded body.

    Args:
        url: Fully resolved URL
        timeout: Seconds before giving up (default: Settings.from_env().http_timeout)
        session: Optional requests.Session to reuse connections
        source: Name used in error messages

    Raises:
        TransportTimeoutError: the timeout elapsed
        TransportError: connection, TLS, HTTP status or decoding failure
    """
    if timeout is None:
        timeout = Settings.from_env().http_timeout
    getter = session.get if session is not None else requests.get

    try:
        response = getter(url, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        logger.warning(f"Timeout after {timeout}s fetching {url}")
        raise TransportTimeoutError(
            f"timed out after {timeout}s", source=source, details={'url': url}) from e
    except requests.RequestException as e:
        raise TransportError(
            f"request failed: {e}", source=source, details={'url': url}) from e

    encoding = response.encoding or 'utf-8'
    try:
        return response.content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise TransportError(
            f"could not decode response body as {encoding}: {e}",
            source=source,
            details={'url': url},
        ) from e
