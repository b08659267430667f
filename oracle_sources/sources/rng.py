"""
Randomness Oracle Source

Draws a fresh value from a declared randomness source on every call.
The default source is the operating system CSPRNG via secrets.randbits.
"""

import secrets
import logging
from typing import Callable, Optional

from ..base import OracleSource, ParamsLike, to_u256
from ..errors import ConfigError, NumericFormatError, RandomnessError

logger = logging.getLogger(__name__)


class RngSourceAdapter(OracleSource):
    """
    Oracle source for random values.

    Configure with:
        - bits: Width of the drawn value, 1..256 (default: 256)
        - randomness: Callable taking the bit width and returning a
          non-negative int (default: secrets.randbits)
    """

    def __init__(
        self,
        name: str = 'rng',
        randomness: Optional[Callable[[int], int]] = None,
        bits: int = 256,
    ):
        super().__init__(name)
        if isinstance(bits, bool) or not isinstance(bits, int) or not 1 <= bits <= 256:
            raise ConfigError(f"bits must be between 1 and 256, got {bits!r}", source=name)
        self._randomness = randomness or secrets.randbits
        self._bits = bits

    @property
    def bits(self) -> int:
        return self._bits

    def fetch(self, params: ParamsLike = None) -> int:
        """Draw a new random value."""
        try:
            value = self._randomness(self._bits)
        except OSError as e:
            raise RandomnessError(f"randomness source unavailable: {e}", source=self.name) from e

        value = to_u256(value, source=self.name)
        if value >> self._bits:
            raise NumericFormatError(
                f"randomness source returned more than {self._bits} bits", source=self.name)
        return value

    @classmethod
    def from_dict(cls, data: dict) -> 'RngSourceAdapter':
        return cls(name=data.get('name', 'rng'), bits=data.get('bits', 256))
