"""
Time Oracle Source

Reports wall-clock time as whole seconds since the Unix epoch, unscaled.
"""

import math
import time
import logging
from typing import Callable, Optional

from ..base import OracleSource, ParamsLike
from ..errors import ClockError

logger = logging.getLogger(__name__)


class TimeSourceAdapter(OracleSource):
    """
    Oracle source for the current Unix time.

    The clock is injectable for tests; it must return seconds since the
    epoch as a number. Request params are ignored.
    """

    def __init__(self, name: str = 'time', clock: Optional[Callable[[], float]] = None):
        super().__init__(name)
        self._clock = clock or time.time

    def fetch(self, params: ParamsLike = None) -> int:
        """Read the clock and return whole seconds since the epoch."""
        try:
            now = self._clock()
        except OSError as e:
            raise ClockError(f"system clock unavailable: {e}", source=self.name) from e

        if not isinstance(now, (int, float)) or not math.isfinite(now):
            raise ClockError(f"clock returned {now!r}", source=self.name)
        if now < 0:
            raise ClockError(f"clock reports {now}, before the epoch", source=self.name)

        return int(now)

    @classmethod
    def from_dict(cls, data: dict) -> 'TimeSourceAdapter':
        return cls(name=data.get('name', 'time'))
