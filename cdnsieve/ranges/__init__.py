"""CDN range aggregation and classification.

This package fetches published CDN / anti-DDoS ranges and classifies IPs:
- Provider fetchers (structured JSON prefix lists, JSON address arrays, text lists)
- ASN prefix resolution through a routing-data API
- Aggregation into one flat range set
- Containment matching and output partitioning

Example:
    >>> from cdnsieve.settings import load_sieve_settings
    >>> from cdnsieve.ranges import CDNClassifier, create_range_aggregator
    >>>
    >>> aggregator = create_range_aggregator(load_sieve_settings())
    >>> classifier = CDNClassifier(aggregator.build())
    >>> classifier.is_cdn("104.16.0.1")
    True
"""

from .aggregator import RangeAggregator, aggregate
from .asn_resolver import ASNPrefixResolver
from .classifier import CDNClassifier, ip_in_cidr
from .factory import create_range_aggregator, create_range_fetchers
from .fetchers import AddressArrayFetcher, PlainTextLinesFetcher, RangeFetcher, StructuredPrefixListFetcher
from .models import Classification, FetchError, FetchResult, ProviderSource, SourceFormat
from .reporter import ClassificationReport, OutputMode, report, write_report

__all__ = [
    "ASNPrefixResolver",
    "AddressArrayFetcher",
    "CDNClassifier",
    "Classification",
    "ClassificationReport",
    "FetchError",
    "FetchResult",
    "OutputMode",
    "PlainTextLinesFetcher",
    "ProviderSource",
    "RangeAggregator",
    "RangeFetcher",
    "SourceFormat",
    "StructuredPrefixListFetcher",
    "aggregate",
    "create_range_aggregator",
    "create_range_fetchers",
    "ip_in_cidr",
    "report",
    "write_report",
]
