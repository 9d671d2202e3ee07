"""Data models for CDN range aggregation.

This module provides the value types passed between fetchers, the ASN resolver,
the aggregator and the classifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FetchError(Exception):
    """Raised when a range source cannot be downloaded or parsed.

    Fetchers raise this internally; it never escapes ``fetch()`` or
    ``lookup()``, which convert it into a failed :class:`FetchResult`.
    """


class SourceFormat(str, Enum):
    """Wire formats published by range providers.

    Attributes:
        STRUCTURED_PREFIX_LIST: JSON document holding an array of prefix objects
        ADDRESS_ARRAY: JSON document holding an array of address/CIDR strings
        PLAIN_TEXT_LINES: Newline-delimited text, one block per line
    """

    STRUCTURED_PREFIX_LIST = "structured_prefix_list"
    ADDRESS_ARRAY = "address_array"
    PLAIN_TEXT_LINES = "plain_text_lines"


@dataclass(slots=True, frozen=True)
class ProviderSource:
    """Where and how to fetch one provider's published ranges.

    Attributes:
        url: HTTP(S) endpoint serving the range document
        format: Wire format of the document
        list_key: JSON key of the embedded array (JSON formats only)
        prefix_field: Field holding the CIDR inside each array element
            (structured prefix lists only)

    Raises:
        ValueError: If a JSON format is missing the keys it needs
    """

    url: str
    format: SourceFormat
    list_key: Optional[str] = None
    prefix_field: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that JSON formats carry their lookup keys."""
        if self.format is not SourceFormat.PLAIN_TEXT_LINES and not self.list_key:
            raise ValueError(f"{self.format.value} source {self.url} requires list_key")
        if self.format is SourceFormat.STRUCTURED_PREFIX_LIST and not self.prefix_field:
            raise ValueError(f"{self.format.value} source {self.url} requires prefix_field")


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Outcome of fetching a single range source.

    A failed fetch carries an error message and no prefixes. The aggregator
    treats it as an empty contribution so one bad provider never aborts a run.

    Attributes:
        source: Provider name or ASN identifier the result came from
        prefixes: CIDR blocks in document order (may contain empty strings)
        error: Failure description, None on success
    """

    source: str
    prefixes: tuple[str, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Return True if the source was fetched and parsed."""
        return self.error is None

    @classmethod
    def failure(cls, source: str, error: str) -> FetchResult:
        """Build a failed result for ``source``."""
        return cls(source=source, prefixes=(), error=error)


@dataclass(slots=True, frozen=True)
class Classification:
    """Classification of one input IP. Only membership is kept, not the matching block."""

    ip: str
    is_cdn: bool
