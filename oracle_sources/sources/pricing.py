"""
Shared fetch-extract-scale pipeline for HTTP/JSON price sources.
"""

import logging
from typing import Optional

import requests

from ..errors import OracleError
from ..normalize import normalize
from ..transport import http_get

logger = logging.getLogger(__name__)


def fetch_price(
    url: str,
    path,
    decimal: int,
    source: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> int:
    """
    GET url, pick the first JSON-path match and scale it by 10**decimal.

    Raises:
        OracleError: TransportError, ParseError, DataNotFound or
            NumericFormatError
    """
    logger.debug(f"{source}: GET {url}")
    try:
        body = http_get(url, timeout=timeout, session=session, source=source)
        return normalize(body, path, decimal, source=source)
    except OracleError as e:
        logger.warning(f"{source}: fetch failed ({e.kind}): {e.message}")
        raise
