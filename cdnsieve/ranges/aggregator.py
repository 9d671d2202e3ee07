"""Range aggregation across provider feeds and ASN lookups."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .asn_resolver import ASNPrefixResolver
from .fetchers import RangeFetcher
from .models import FetchResult
from .registry import ASNRegistry

logger = logging.getLogger(__name__)

SourceTask = Callable[[], List[FetchResult]]


def aggregate(*sequences: Iterable[str]) -> Tuple[str, ...]:
    """Concatenate CIDR sequences in argument order, dropping empty strings.

    Duplicates and overlapping blocks are kept; they do not change match results.

    Example:
        >>> aggregate(["10.0.0.0/8", ""], ["10.0.0.0/8"])
        ('10.0.0.0/8', '10.0.0.0/8')
    """
    return tuple(block for sequence in sequences for block in sequence if block != "")


class RangeAggregator:
    """Build the aggregated range set from every configured source.

    Provider fetchers run first in registry order, then ASN providers in
    registry order. Failed sources contribute nothing. With ``max_workers``
    above 1 the sources are fetched on a thread pool and joined before
    aggregation; results are put back in declaration order, so the range set
    is identical to a sequential run.

    Example:
        >>> aggregator = create_range_aggregator(SieveSettings.from_sources())
        >>> ranges = aggregator.build()
        >>> aggregator.get_stats()["failed_sources"]
        []
    """

    def __init__(
        self,
        fetchers: Sequence[RangeFetcher],
        resolver: Optional[ASNPrefixResolver] = None,
        asn_registry: Optional[ASNRegistry] = None,
        max_workers: int = 1,
    ) -> None:
        """Initialize aggregator.

        Args:
            fetchers: Provider fetchers, in aggregation order
            resolver: ASN resolver; required when ``asn_registry`` is non-empty
            asn_registry: Provider name to ASN ids, in aggregation order
            max_workers: Number of concurrent fetches (1 = sequential)

        Raises:
            ValueError: If max_workers < 1 or ASNs are given without a resolver
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if asn_registry and resolver is None:
            raise ValueError("an ASNPrefixResolver is required when ASN providers are configured")

        self.fetchers = list(fetchers)
        self.resolver = resolver
        self.asn_registry = asn_registry or {}
        self.max_workers = max_workers

        self.results: List[FetchResult] = []
        self.range_set: Tuple[str, ...] = ()

    def _tasks(self) -> List[SourceTask]:
        tasks: List[SourceTask] = []
        for fetcher in self.fetchers:
            tasks.append(lambda fetcher=fetcher: [fetcher.fetch()])
        resolver = self.resolver
        if resolver is not None:
            for provider, asns in self.asn_registry.items():
                tasks.append(lambda provider=provider, asns=asns, resolver=resolver: resolver.resolve(provider, asns))
        return tasks

    def _run(self, tasks: List[SourceTask]) -> List[List[FetchResult]]:
        if self.max_workers == 1 or len(tasks) <= 1:
            return [task() for task in tasks]

        ordered: List[List[FetchResult]] = [[] for _ in tasks]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(task): index for index, task in enumerate(tasks)}
            for future, index in futures.items():
                ordered[index] = future.result()
        return ordered

    def build(self) -> Tuple[str, ...]:
        """Fetch every source and return the aggregated range set.

        Returns:
            Tuple of CIDR blocks with empty strings removed
        """
        tasks = self._tasks()
        logger.info(f"Building range set from {len(tasks)} sources (workers={self.max_workers})")

        self.results = [result for batch in self._run(tasks) for result in batch]
        self.range_set = aggregate(*(result.prefixes for result in self.results if result.ok))

        failed = [result.source for result in self.results if not result.ok]
        if failed:
            logger.warning(f"{len(failed)} sources unavailable, coverage reduced: {', '.join(failed)}")
        logger.info(f"Range set built: {len(self.range_set)} blocks")
        return self.range_set

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics for the last build.

        Returns:
            Dict with keys: sources, failed_sources, total_blocks, source_blocks
        """
        return {
            "sources": len(self.results),
            "failed_sources": [result.source for result in self.results if not result.ok],
            "total_blocks": len(self.range_set),
            "source_blocks": {result.source: len(result.prefixes) for result in self.results},
        }
