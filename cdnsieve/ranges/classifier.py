"""CDN membership classifier.

Matching is a linear scan over the aggregated range set with early exit on the
first containing block. Range sets are in the low thousands and the scan runs
once per invocation, so no prefix tree is built.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Any, Dict, Iterable, List, Union

from .models import Classification

logger = logging.getLogger(__name__)

Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _parse_network(cidr: str) -> Network:
    # strict=False accepts host bits; a bare address parses as a /32 (or /128)
    return ipaddress.ip_network(cidr.strip(), strict=False)


def ip_in_cidr(ip: str, cidr: str) -> bool:
    """Return True if ``ip`` lies inside ``cidr``.

    A malformed address or block is a non-match, never an error. An address
    without a prefix length is treated as a single host.

    Example:
        >>> ip_in_cidr("192.168.5.1", "192.168.5.0/24")
        True
        >>> ip_in_cidr("192.168.5.1", "not-a-cidr")
        False
    """
    try:
        return ipaddress.ip_address(ip.strip()) in _parse_network(cidr)
    except ValueError:
        return False


class CDNClassifier:
    """Classify IPs as CDN or real against a fixed range set.

    Blocks are parsed once at construction. Unparsable blocks are counted and
    skipped, which is equivalent to them never matching.

    Attributes:
        networks: Parsed networks in range set order
        invalid_blocks: Blocks that could not be parsed

    Example:
        >>> classifier = CDNClassifier(["192.168.5.0/24"])
        >>> [c.is_cdn for c in classifier.bulk_classify(["1.2.3.4", "192.168.5.1"])]
        [False, True]
    """

    def __init__(self, range_set: Iterable[str]) -> None:
        """Initialize classifier.

        Args:
            range_set: Aggregated CIDR blocks
        """
        self.networks: List[Network] = []
        self.invalid_blocks: List[str] = []

        for block in range_set:
            try:
                self.networks.append(_parse_network(block))
            except ValueError:
                self.invalid_blocks.append(block)
                logger.debug(f"Skipping unparsable block {block!r}")

        if self.invalid_blocks:
            logger.info(f"Ignored {len(self.invalid_blocks)} unparsable blocks")

        self._stats = {
            "lookups": 0,
            "hits": 0,
            "misses": 0,
            "invalid_ips": 0,
        }

    def is_cdn(self, ip: str) -> bool:
        """Return True if ``ip`` falls inside any block; malformed input is False."""
        self._stats["lookups"] += 1
        try:
            address = ipaddress.ip_address(ip.strip())
        except ValueError:
            self._stats["invalid_ips"] += 1
            self._stats["misses"] += 1
            return False

        for network in self.networks:
            if address in network:
                self._stats["hits"] += 1
                return True

        self._stats["misses"] += 1
        return False

    def classify(self, ip: str) -> Classification:
        """Classify a single IP."""
        return Classification(ip=ip, is_cdn=self.is_cdn(ip))

    def bulk_classify(self, ips: Iterable[str]) -> List[Classification]:
        """Classify each IP once, keeping input order and duplicates."""
        return [self.classify(ip) for ip in ips]

    def get_stats(self) -> Dict[str, Any]:
        """Return classifier statistics.

        Returns:
            Dict with keys: networks, invalid_blocks, lookups, hits, misses,
            invalid_ips, hit_rate
        """
        stats: Dict[str, Any] = dict(self._stats)
        stats["networks"] = len(self.networks)
        stats["invalid_blocks"] = len(self.invalid_blocks)
        stats["hit_rate"] = self._stats["hits"] / self._stats["lookups"] if self._stats["lookups"] else 0.0
        return stats
