"""Provider range fetchers.

This module provides the abstract base class and one concrete fetcher per
published range format. Every fetcher issues exactly one HTTP GET per
``fetch()`` call and never raises: failures come back as a failed
:class:`~cdnsieve.ranges.models.FetchResult`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping

import requests

from ._http import get_response, load_json
from .models import FetchError, FetchResult

logger = logging.getLogger(__name__)


class RangeFetcher(ABC):
    """Abstract base class for provider range fetchers.

    Subclasses only implement ``_parse(response)``; download, status checking,
    error conversion and statistics live here.

    Attributes:
        name: Provider name used in logs and results
        url: Endpoint serving the range document
        request_timeout: HTTP timeout in seconds

    Example:
        >>> fetcher = PlainTextLinesFetcher("CLOUDFLARE", "https://www.cloudflare.com/ips-v4")
        >>> result = fetcher.fetch()
        >>> result.ok, len(result.prefixes)
        (True, 15)
    """

    def __init__(self, name: str, url: str, request_timeout: float = 30) -> None:
        """Initialize fetcher.

        Args:
            name: Provider name (e.g. "AMAZON")
            url: Endpoint serving the range document
            request_timeout: HTTP timeout in seconds (default: 30)
        """
        self.name = name
        self.url = url
        self.request_timeout = request_timeout

        self._stats_fetches = 0
        self._stats_failures = 0
        self._stats_prefixes = 0

    def fetch(self) -> FetchResult:
        """Download and parse this provider's ranges.

        Returns:
            FetchResult with the parsed CIDR blocks, or a failed result carrying
            the error message if the request, status check or parse failed.
        """
        self._stats_fetches += 1
        logger.info(f"{self.__class__.__name__}: Fetching {self.name} ranges from {self.url}")

        try:
            response = self._download()
            prefixes = self._parse(response)
        except FetchError as e:
            self._stats_failures += 1
            logger.error(f"{self.__class__.__name__}: Failed to fetch {self.name} ranges: {e}")
            return FetchResult.failure(self.name, str(e))

        self._stats_prefixes += len(prefixes)
        logger.info(f"{self.__class__.__name__}: Loaded {len(prefixes)} {self.name} blocks")
        return FetchResult(source=self.name, prefixes=tuple(prefixes))

    def _download(self) -> requests.Response:
        """Issue the GET request and check the status.

        Raises:
            FetchError: On transport failure or any status other than 200
        """
        return get_response(self.url, self.request_timeout)

    def _load_json(self, response: requests.Response) -> Any:
        return load_json(response, self.url)

    @abstractmethod
    def _parse(self, response: requests.Response) -> List[str]:
        """Extract candidate CIDR blocks from a successful response.

        Raises:
            FetchError: If the document does not match the expected schema
        """

    def get_stats(self) -> Dict[str, Any]:
        """Get fetcher statistics.

        Returns:
            Dict with keys: provider, fetches, failures, prefixes
        """
        return {
            "provider": self.name,
            "fetches": self._stats_fetches,
            "failures": self._stats_failures,
            "prefixes": self._stats_prefixes,
        }


def _lookup_key(document: Any, key: str) -> Any:
    """Return ``document[key]``, falling back to a case-insensitive key match."""
    if not isinstance(document, Mapping):
        raise FetchError(f"expected a JSON object, got {type(document).__name__}")
    if key in document:
        return document[key]
    lowered = key.lower()
    for candidate, value in document.items():
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return value
    raise FetchError(f"missing key {key!r} in JSON document")


def _require_list(value: Any, key: str) -> List[Any]:
    if not isinstance(value, list):
        raise FetchError(f"expected {key!r} to be a list, got {type(value).__name__}")
    return value


class StructuredPrefixListFetcher(RangeFetcher):
    """Fetch a JSON document with an array of prefix objects.

    Used for cloud feeds such as AWS ``ip-ranges.json`` (``prefixes[].ip_prefix``)
    and Google ``cloud.json`` (``prefixes[].ipv4Prefix``). Elements whose prefix
    field is missing or empty are skipped, so IPv6-only entries drop out.
    """

    def __init__(
        self,
        name: str,
        url: str,
        list_key: str,
        prefix_field: str,
        request_timeout: float = 30,
    ) -> None:
        """Initialize structured prefix list fetcher.

        Args:
            name: Provider name
            url: Endpoint serving the JSON document
            list_key: Key of the prefix array in the document
            prefix_field: Field holding the CIDR in each array element
            request_timeout: HTTP timeout in seconds
        """
        super().__init__(name=name, url=url, request_timeout=request_timeout)
        self.list_key = list_key
        self.prefix_field = prefix_field

    def _parse(self, response: requests.Response) -> List[str]:
        document = self._load_json(response)
        records = _require_list(_lookup_key(document, self.list_key), self.list_key)

        prefixes: List[str] = []
        for record in records:
            if not isinstance(record, Mapping):
                continue
            prefix = record.get(self.prefix_field)
            if isinstance(prefix, str) and prefix:
                prefixes.append(prefix)
        return prefixes


class AddressArrayFetcher(RangeFetcher):
    """Fetch a JSON document holding an array of address strings.

    Fastly's ``public-ip-list`` is the reference shape::

        {"addresses": ["23.235.32.0/20", ...], "ipv6_addresses": [...]}

    Each element is taken as-is; entries without a prefix length are matched
    as single hosts by the classifier. Only the configured list is read.
    """

    def __init__(self, name: str, url: str, list_key: str, request_timeout: float = 30) -> None:
        """Initialize address array fetcher.

        Args:
            name: Provider name
            url: Endpoint serving the JSON document
            list_key: Key of the address array (matched case-insensitively)
            request_timeout: HTTP timeout in seconds
        """
        super().__init__(name=name, url=url, request_timeout=request_timeout)
        self.list_key = list_key

    def _parse(self, response: requests.Response) -> List[str]:
        document = self._load_json(response)
        addresses = _require_list(_lookup_key(document, self.list_key), self.list_key)
        return [address for address in addresses if isinstance(address, str)]


class PlainTextLinesFetcher(RangeFetcher):
    """Fetch a newline-delimited list of CIDR blocks.

    Every line is a candidate, including empty trailing lines; the aggregator
    removes empty strings. Surrounding whitespace (and ``\\r`` from CRLF feeds)
    is stripped.
    """

    def _parse(self, response: requests.Response) -> List[str]:
        return [line.strip() for line in response.text.split("\n")]
