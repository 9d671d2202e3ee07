"""ASN to announced-prefix resolver backed by a routing-data HTTP API.

The default endpoint is BGPView's ``/asn/{asn}/prefixes``::

    {
      "status": "ok",
      "data": {
        "ipv4_prefixes": [{"prefix": "23.0.0.0/12", "ip": "23.0.0.0", "cidr": 12, ...}],
        "ipv6_prefixes": [...]
      }
    }

Only ``ipv4_prefixes[].prefix`` is used. Lookups are sequential, one GET per
ASN, and a failed lookup yields no prefixes for that ASN only.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping

from ._http import get_response, load_json
from .models import FetchError, FetchResult
from .registry import DEFAULT_ASN_LOOKUP_URL, normalize_asn, validate_lookup_url

logger = logging.getLogger(__name__)


class ASNPrefixResolver:
    """Resolve ASNs to their announced IPv4 prefixes.

    Example:
        >>> resolver = ASNPrefixResolver()
        >>> resolver.resolve_prefixes(["AS57724"])[:2]
        ['185.178.208.0/22', '186.2.160.0/20']
    """

    def __init__(
        self,
        lookup_url_template: str = DEFAULT_ASN_LOOKUP_URL,
        request_timeout: float = 30,
    ) -> None:
        """Initialize resolver.

        Args:
            lookup_url_template: URL with an ``{asn}`` placeholder
            request_timeout: HTTP timeout in seconds (default: 30)

        Raises:
            ValueError: If the template lacks ``{asn}`` or uses any other field
        """
        self.lookup_url_template = validate_lookup_url(lookup_url_template)
        self.request_timeout = request_timeout

        self.stats: dict[str, int] = {
            "lookups": 0,
            "failures": 0,
            "prefixes": 0,
        }
        self._lock = threading.Lock()

    def lookup(self, asn: str | int) -> FetchResult:
        """Fetch the announced IPv4 prefixes of a single ASN.

        Args:
            asn: ASN identifier, with or without the ``AS`` prefix

        Returns:
            FetchResult keyed by the normalized ASN; failed if the request,
            status check or JSON parse failed
        """
        self._count("lookups")
        source = str(asn)

        try:
            source = normalize_asn(asn)
            url = self.lookup_url_template.format(asn=source)
            logger.debug(f"Looking up prefixes for {source} at {url}")
            prefixes = self._extract_prefixes(self._request(url))
        except (FetchError, ValueError) as e:
            self._count("failures")
            logger.error(f"Prefix lookup for {source} failed: {e}")
            return FetchResult.failure(source, str(e))

        self._count("prefixes", len(prefixes))
        logger.debug(f"{source}: {len(prefixes)} IPv4 prefixes")
        return FetchResult(source=source, prefixes=tuple(prefixes))

    def resolve(self, provider: str, asns: Iterable[str | int]) -> List[FetchResult]:
        """Look up every ASN of ``provider`` in order, one result per ASN."""
        results = [self.lookup(asn) for asn in asns]
        total = sum(len(result.prefixes) for result in results)
        failed = [result.source for result in results if not result.ok]
        if failed:
            logger.warning(f"{provider}: {len(failed)} ASN lookups failed ({', '.join(failed)})")
        logger.info(f"{provider}: {total} prefixes from {len(results)} ASNs")
        return results

    def resolve_prefixes(self, asns: Iterable[str | int]) -> List[str]:
        """Return the flattened prefixes of every successfully resolved ASN."""
        prefixes: List[str] = []
        for asn in asns:
            prefixes.extend(self.lookup(asn).prefixes)
        return prefixes

    def _request(self, url: str) -> Any:
        return load_json(get_response(url, self.request_timeout), url)

    @staticmethod
    def _extract_prefixes(payload: Any) -> List[str]:
        if not isinstance(payload, Mapping):
            raise FetchError("expected a JSON object")

        status = payload.get("status", "ok")
        if status != "ok":
            raise FetchError(f"lookup service returned status {status!r}: {payload.get('status_message', '')}")

        data = payload.get("data")
        if not isinstance(data, Mapping):
            raise FetchError("response has no 'data' object")

        records = data.get("ipv4_prefixes") or []
        if not isinstance(records, list):
            raise FetchError("'ipv4_prefixes' is not a list")

        prefixes: List[str] = []
        for record in records:
            if not isinstance(record, Mapping):
                continue
            prefix = record.get("prefix")
            if isinstance(prefix, str) and prefix:
                prefixes.append(prefix)
        return prefixes

    def get_stats(self) -> Dict[str, int]:
        """Return a copy of the lookup counters."""
        with self._lock:
            return self.stats.copy()

    def _count(self, key: str, amount: int = 1) -> None:
        # lookups may run on worker threads
        with self._lock:
            self.stats[key] += amount
