"""
Error taxonomy for oracle sources.

Every failure a fetch can produce is one of the subclasses below, so a
caller orchestrating several sources can catch OracleError per source and
decide for itself whether to retry, skip or fall back.
"""

from typing import Optional, Dict, Any


class OracleError(Exception):
    """Base exception for all oracle source failures."""

    kind: str = 'oracle'

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.details = details or {}

    def __str__(self) -> str:
        if self.source:
            return f"[{self.source}] {self.message}"
        return self.message


class ClockError(OracleError):
    """System clock unavailable or reporting a time before the epoch."""
    kind = 'clock'


class RandomnessError(OracleError):
    """Randomness source unavailable."""
    kind = 'randomness'


class TransportError(OracleError):
    """Connection, TLS, HTTP status or body decoding failure."""
    kind = 'transport'


class TransportTimeoutError(TransportError):
    kind = 'timeout'


class ParseError(OracleError):
    """Response body is not well-formed JSON."""
    kind = 'parse'


class DataNotFound(OracleError):
    """JSON-path query matched zero elements."""
    kind = 'data_not_found'


class NumericFormatError(OracleError):
    """Value is not a non-negative finite number that fits in 256 bits."""
    kind = 'numeric_format'


class IndexOutOfRange(OracleError):
    """Requested symbol index is outside the configured list."""
    kind = 'index_out_of_range'


class ConfigError(OracleError):
    """Adapter configuration is invalid."""
    kind = 'config'
