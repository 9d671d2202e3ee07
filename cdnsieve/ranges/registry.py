"""Default provider and ASN registries.

Both registries are read-only mappings. Iteration order is the aggregation
order, so changing the declaration order changes output order of the range set.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from .models import ProviderSource, SourceFormat

DEFAULT_ASN_LOOKUP_URL = "https://api.bgpview.io/asn/{asn}/prefixes"

ProviderRegistry = Mapping[str, ProviderSource]
ASNRegistry = Mapping[str, Tuple[str, ...]]

DEFAULT_PROVIDERS: ProviderRegistry = MappingProxyType(
    {
        "AMAZON": ProviderSource(
            url="https://ip-ranges.amazonaws.com/ip-ranges.json",
            format=SourceFormat.STRUCTURED_PREFIX_LIST,
            list_key="prefixes",
            prefix_field="ip_prefix",
        ),
        "FASTLY": ProviderSource(
            url="https://api.fastly.com/public-ip-list",
            format=SourceFormat.ADDRESS_ARRAY,
            list_key="addresses",
        ),
        "GOOGLE": ProviderSource(
            url="https://www.gstatic.com/ipranges/cloud.json",
            format=SourceFormat.STRUCTURED_PREFIX_LIST,
            list_key="prefixes",
            prefix_field="ipv4Prefix",
        ),
        "CLOUDFLARE": ProviderSource(
            url="https://www.cloudflare.com/ips-v4",
            format=SourceFormat.PLAIN_TEXT_LINES,
        ),
        "CACHEFLY": ProviderSource(
            url="https://cachefly.cachefly.net/ips/rproxy.txt",
            format=SourceFormat.PLAIN_TEXT_LINES,
        ),
    }
)

DEFAULT_ASNS: ASNRegistry = MappingProxyType(
    {
        "AKAMAI": ("AS12222", "AS16625"),
        "DDOSGUARD": ("AS57724",),
        "QRATOR": ("AS200449",),
        "STACKPATH": ("AS12989",),
        "STORMWALL": ("AS59796",),
        "SUCURI": ("AS30148",),
        "X4B": ("AS136165",),
        "CDNNETWORKS": ("AS36408",),
    }
)


def normalize_asn(asn: str | int) -> str:
    """Return ``asn`` in canonical ``AS<number>`` form.

    Raises:
        ValueError: If the identifier has no numeric part
    """
    text = str(asn).strip().upper()
    if text.startswith("AS"):
        text = text[2:]
    if not text.isdigit():
        raise ValueError(f"Invalid ASN identifier: {asn!r}")
    return f"AS{int(text)}"


def validate_lookup_url(template: str) -> str:
    """Return ``template`` if it formats with an ``asn`` keyword alone.

    Raises:
        ValueError: If ``{asn}`` is missing or another field would fail to format
    """
    if "{asn}" not in template:
        raise ValueError(f"ASN lookup URL must contain an {{asn}} placeholder: {template}")
    try:
        template.format(asn="AS0")
    except (KeyError, IndexError, AttributeError, ValueError) as e:
        raise ValueError(f"ASN lookup URL has an unsupported placeholder: {template} ({e!r})") from e
    return template


def freeze_asn_registry(asns: Mapping[str, Iterable[str | int]]) -> ASNRegistry:
    """Copy ``asns`` into an immutable registry with normalized identifiers."""
    return MappingProxyType({name: tuple(normalize_asn(asn) for asn in values) for name, values in asns.items()})


def freeze_provider_registry(providers: Mapping[str, ProviderSource | Mapping[str, str]]) -> ProviderRegistry:
    """Copy ``providers`` into an immutable registry.

    Entries may be :class:`ProviderSource` instances or plain mappings as read
    from a TOML table (``url``, ``format`` and optional ``list_key`` /
    ``prefix_field``).
    """
    frozen: dict[str, ProviderSource] = {}
    for name, source in providers.items():
        if isinstance(source, ProviderSource):
            frozen[name] = source
            continue
        if "url" not in source or "format" not in source:
            raise ValueError(f"Provider {name} needs both url and format")
        frozen[name] = ProviderSource(
            url=source["url"],
            format=SourceFormat(source["format"]),
            list_key=source.get("list_key"),
            prefix_field=source.get("prefix_field"),
        )
    return MappingProxyType(frozen)
