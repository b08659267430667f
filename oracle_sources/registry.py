"""
Source Registry

Builds oracle sources from configuration records and looks them up by
name. It does not choose which sources to query or combine their results;
callers do that with the adapters it hands out.
"""

import logging
from typing import Dict, Iterable, List, Optional, Type

from .base import OracleSource, ParamsLike
from .config import Settings, find_config, load_records
from .errors import ConfigError

logger = logging.getLogger(__name__)


class SourceRegistry:
    """
    Holds configured oracle sources.

    Responsibilities:
    - Map record 'type' values to adapter classes
    - Build adapters from a source list file or decoded records
    - Provide lookup and a fetch-by-name convenience
    """

    def __init__(self, settings: Optional[Settings] = None, session=None):
        """
        Initialize the registry.

        Args:
            settings: Process settings (default: read from environment)
            session: Optional requests.Session shared by HTTP sources
        """
        self.settings = settings or Settings.from_env()
        self.session = session

        self._sources: Dict[str, OracleSource] = {}
        self._source_classes: Dict[str, Type[OracleSource]] = {}

        self._register_builtin_sources()

    def _register_builtin_sources(self):
        """Register built-in source types."""
        from .sources import (
            CustomSourceAdapter,
            ExchangeSourceAdapter,
            RngSourceAdapter,
            TimeSourceAdapter,
        )
        self._source_classes['time'] = TimeSourceAdapter
        self._source_classes['rng'] = RngSourceAdapter
        self._source_classes['exchange'] = ExchangeSourceAdapter
        self._source_classes['custom'] = CustomSourceAdapter

    def register_type(self, name: str, source_class: Type[OracleSource]):
        """Register a custom source type."""
        self._source_classes[name] = source_class

    def _create_source(self, record: dict) -> OracleSource:
        """Create a source from one configuration record."""
        source_type = record.get('type', 'exchange')
        source_class = self._source_classes.get(source_type)
        if not source_class:
            raise ConfigError(f"unknown source type: {source_type}", source=record.get('name'))

        data = {k: v for k, v in record.items() if k != 'type'}
        if source_type in ('exchange', 'custom'):
            return source_class.from_dict(
                data, timeout=self.settings.http_timeout, session=self.session)
        return source_class.from_dict(data)

    def add(self, source: OracleSource) -> OracleSource:
        """Add a constructed source. Names must be unique."""
        if source.name in self._sources:
            raise ConfigError(f"duplicate source name: {source.name}", source=source.name)
        self._sources[source.name] = source
        logger.debug(f"Registered source {source.name} ({type(source).__name__})")
        return source

    def load_records(self, records: Iterable[dict]) -> List[OracleSource]:
        """Build and add a source for every record."""
        created = [self._create_source(record) for record in records]

        # all or nothing: nothing is registered if any name clashes
        batch: Dict[str, OracleSource] = {}
        for source in created:
            if source.name in self._sources or source.name in batch:
                raise ConfigError(f"duplicate source name: {source.name}", source=source.name)
            batch[source.name] = source
        for source in created:
            self.add(source)
        logger.info(f"Loaded {len(created)} sources, {len(self._sources)} total")
        return created

    def load(self, path: Optional[str] = None) -> List[OracleSource]:
        """Load sources from a YAML/JSON source list."""
        path = path or find_config(self.settings)
        return self.load_records(load_records(path))

    # =========================================================================
    # Public API
    # =========================================================================

    def get(self, name: str) -> OracleSource:
        """Get a source by name."""
        try:
            return self._sources[name]
        except KeyError:
            raise ConfigError(f"no source named {name!r}") from None

    def names(self) -> List[str]:
        """List all source names."""
        return list(self._sources.keys())

    def remove(self, name: str) -> bool:
        """Remove a source by name. Returns False if it was not registered."""
        return self._sources.pop(name, None) is not None

    def fetch(self, name: str, params: ParamsLike = None) -> int:
        """Fetch from the named source."""
        return self.get(name).fetch(params)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, name: str) -> bool:
        return name in self._sources
