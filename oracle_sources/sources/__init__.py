"""
Built-in Oracle Sources

Available sources:
- TimeSourceAdapter: Unix time in seconds
- RngSourceAdapter: Random value from a declared randomness source
- ExchangeSourceAdapter: Templated multi-pair exchange price
- CustomSourceAdapter: Price from one fixed URL
"""

from .clock import TimeSourceAdapter
from .rng import RngSourceAdapter
from .exchange import ExchangeSourceAdapter
from .custom import CustomSourceAdapter

__all__ = [
    "TimeSourceAdapter",
    "RngSourceAdapter",
    "ExchangeSourceAdapter",
    "CustomSourceAdapter",
]
