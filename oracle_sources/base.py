"""
Base Oracle Source Class

Provides the contract shared by every oracle source: a single blocking
fetch operation that returns a fixed-point unsigned 256-bit integer.
Sources hold no mutable state between calls, so one instance may be
shared across threads without locking.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .errors import IndexOutOfRange, NumericFormatError

logger = logging.getLogger(__name__)

U256_MAX = 2 ** 256 - 1


def to_u256(value: int, source: Optional[str] = None) -> int:
    """Bounds-check an integer against the unsigned 256-bit range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise NumericFormatError(
            f"expected an integer, got {type(value).__name__}", source=source)
    if value < 0:
        raise NumericFormatError(f"negative value {value}", source=source)
    if value > U256_MAX:
        raise NumericFormatError("value does not fit in 256 bits", source=source)
    return value


@dataclass(frozen=True)
class RequestParams:
    """
    Per-call selection parameters.

    Exchange sources read quote_index (into quotes) and base_index (into
    bases). Every other source ignores them, so an empty RequestParams()
    is always acceptable.
    """

    quote_index: Optional[int] = None
    base_index: Optional[int] = None

    def __post_init__(self):
        for index in (self.quote_index, self.base_index):
            if index is None:
                continue
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise IndexOutOfRange(f"invalid symbol index {index!r}")

    @classmethod
    def from_sequence(cls, data: Sequence[int]) -> 'RequestParams':
        """
        Build from a legacy ordered byte sequence.

        Position 0 is the quote index, position 1 the base index. Extra
        entries are ignored, missing ones stay None.
        """
        try:
            values = list(data)
        except TypeError as e:
            raise IndexOutOfRange(f"request params must be a sequence, got {data!r}") from e
        return cls(
            quote_index=values[0] if len(values) > 0 else None,
            base_index=values[1] if len(values) > 1 else None,
        )

    @classmethod
    def coerce(
        cls,
        params: Union['RequestParams', Sequence[int], None],
    ) -> 'RequestParams':
        if params is None:
            return cls()
        if isinstance(params, cls):
            return params
        return cls.from_sequence(params)


ParamsLike = Union[RequestParams, Sequence[int], None]


class OracleSource(ABC):
    """
    Abstract base class for oracle sources.

    Subclasses must implement:
        - fetch(): Read the current value and return it as a U256 integer

    A fetch performs a fresh read every time. Nothing is cached, retried
    or rate limited here; those are the caller's concerns.
    """

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        """Get the source name."""
        return self._name

    @abstractmethod
    def fetch(self, params: ParamsLike = None) -> int:
        """
        Fetch the current value.

        Args:
            params: Selection parameters (RequestParams, a legacy byte
                sequence, or None)

        Returns:
            The normalized value as an unsigned 256-bit integer

        Raises:
            OracleError: exactly one error kind describing the failure
        """

    async def fetch_async(self, params: ParamsLike = None) -> int:
        """Run the blocking fetch in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.fetch(params))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
