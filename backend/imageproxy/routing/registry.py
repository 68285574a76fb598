"""Source registry: maps request path prefixes to upstream source configuration.

Usage:
    registry = SourceRegistry({
        "/cdn/": SourceConfiguration(base_url=urlsplit("https://cdn.example.com/"),
                                     default_options=Options(quality=80)),
    })
    match = registry.best_match("/cdn/images/a.jpg")

A registry never changes after construction.  Reconfiguring means building a
new one and handing it to ``set_registry``; requests already holding the old
snapshot keep using it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import SplitResult

from imageproxy.models.options import Options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceConfiguration:
    """Optional absolute base URL plus the default Options for one source."""

    base_url: SplitResult | None = None
    default_options: Options = field(default_factory=Options)


@dataclass(frozen=True)
class SourceMatch:
    prefix: str
    config: SourceConfiguration


class SourceRegistry:
    """Immutable prefix -> SourceConfiguration snapshot with longest-prefix lookup."""

    def __init__(self, sources: Mapping[str, SourceConfiguration] | None = None) -> None:
        self._sources: Mapping[str, SourceConfiguration] = MappingProxyType(dict(sources or {}))
        # Longest stripped prefix first; equal lengths in lexicographic order
        self._match_order: tuple[tuple[str, str], ...] = tuple(
            sorted(
                ((prefix.rstrip("/"), prefix) for prefix in self._sources),
                key=lambda item: (-len(item[0]), item[1]),
            )
        )
        logger.debug("Built source registry with %d prefixes", len(self._sources))

    def best_match(self, escaped_path: str) -> SourceMatch | None:
        """Return the registered prefix that best matches ``escaped_path``.

        Prefixes are compared with trailing slashes removed; the longest match
        wins and ties go to the lexicographically smallest prefix.
        """
        for stripped, prefix in self._match_order:
            if escaped_path.startswith(stripped):
                logger.debug("Path %r matched source prefix %r", escaped_path, prefix)
                return SourceMatch(prefix=prefix, config=self._sources[prefix])
        return None

    def get(self, prefix: str) -> SourceConfiguration | None:
        return self._sources.get(prefix)

    @property
    def prefixes(self) -> list[str]:
        return sorted(self._sources)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._sources

    def __iter__(self) -> Iterator[str]:
        return iter(self.prefixes)

    def __len__(self) -> int:
        return len(self._sources)


# Module-level snapshot shared by every request
_registry = SourceRegistry()
_swap_lock = threading.Lock()


def get_registry() -> SourceRegistry:
    return _registry


def set_registry(registry: SourceRegistry) -> SourceRegistry:
    """Swap in a new registry snapshot, returning the one it replaced."""
    global _registry
    with _swap_lock:
        previous, _registry = _registry, registry
    logger.info("Source registry replaced (%d -> %d prefixes)", len(previous), len(registry))
    return previous
