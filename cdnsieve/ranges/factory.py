"""Factory functions wiring fetchers and the resolver from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from .aggregator import RangeAggregator
from .asn_resolver import ASNPrefixResolver
from .fetchers import AddressArrayFetcher, PlainTextLinesFetcher, RangeFetcher, StructuredPrefixListFetcher
from .models import ProviderSource, SourceFormat

if TYPE_CHECKING:
    from ..settings import SieveSettings

logger = logging.getLogger(__name__)


def create_fetcher(name: str, source: ProviderSource, request_timeout: float = 30) -> RangeFetcher:
    """Create the fetcher variant matching ``source.format``."""
    if source.format is SourceFormat.STRUCTURED_PREFIX_LIST:
        return StructuredPrefixListFetcher(
            name=name,
            url=source.url,
            list_key=source.list_key or "",
            prefix_field=source.prefix_field or "",
            request_timeout=request_timeout,
        )
    if source.format is SourceFormat.ADDRESS_ARRAY:
        return AddressArrayFetcher(
            name=name,
            url=source.url,
            list_key=source.list_key or "",
            request_timeout=request_timeout,
        )
    return PlainTextLinesFetcher(name=name, url=source.url, request_timeout=request_timeout)


def create_range_fetchers(settings: SieveSettings) -> List[RangeFetcher]:
    """Create one fetcher per provider, in registry order."""
    return [
        create_fetcher(name, source, request_timeout=settings.request_timeout)
        for name, source in settings.providers.items()
    ]


def create_range_aggregator(settings: SieveSettings) -> RangeAggregator:
    """Create a fully wired RangeAggregator.

    Args:
        settings: Resolved runtime settings

    Returns:
        RangeAggregator ready for ``build()``

    Example:
        >>> from cdnsieve.settings import load_sieve_settings
        >>> aggregator = create_range_aggregator(load_sieve_settings())
        >>> range_set = aggregator.build()
    """
    resolver = ASNPrefixResolver(
        lookup_url_template=settings.asn_lookup_url,
        request_timeout=settings.request_timeout,
    )
    aggregator = RangeAggregator(
        fetchers=create_range_fetchers(settings),
        resolver=resolver,
        asn_registry=settings.asns,
        max_workers=settings.workers,
    )
    logger.debug(
        f"RangeAggregator created: {len(settings.providers)} providers, "
        f"{sum(len(asns) for asns in settings.asns.values())} ASNs"
    )
    return aggregator
