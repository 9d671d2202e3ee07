"""Test fixtures for CDN range aggregation.

Mock provider documents trimmed from the real feeds, plus sample addresses
inside and outside each provider's ranges.
"""

from __future__ import annotations

from typing import Any, Dict
from unittest.mock import Mock

# Sample IP addresses for testing
SAMPLE_AMAZON_IP = "3.5.140.7"
SAMPLE_FASTLY_IP = "151.101.1.69"
SAMPLE_GOOGLE_IP = "34.80.10.10"
SAMPLE_CLOUDFLARE_IP = "104.16.0.1"
SAMPLE_CACHEFLY_IP = "205.234.175.175"
SAMPLE_AKAMAI_IP = "23.32.0.5"
SAMPLE_DDOSGUARD_IP = "186.2.160.10"
SAMPLE_REAL_IP = "131.0.72.124"
SAMPLE_UNKNOWN_IP = "192.0.2.1"  # TEST-NET-1

MOCK_AMAZON_JSON: Dict[str, Any] = {
    "syncToken": "1700000000",
    "createDate": "2024-01-01-00-00-00",
    "prefixes": [
        {
            "ip_prefix": "3.5.140.0/22",
            "region": "ap-northeast-2",
            "service": "AMAZON",
            "network_border_group": "ap-northeast-2",
        },
        {
            "ip_prefix": "13.34.37.64/27",
            "region": "ap-southeast-4",
            "service": "AMAZON",
            "network_border_group": "ap-southeast-4",
        },
        {"ip_prefix": "", "region": "GLOBAL", "service": "AMAZON", "network_border_group": "GLOBAL"},
    ],
    "ipv6_prefixes": [
        {"ipv6_prefix": "2600:1f14::/35", "region": "us-west-2", "service": "AMAZON"},
    ],
}

MOCK_FASTLY_JSON: Dict[str, Any] = {
    "addresses": ["23.235.32.0/20", "151.101.0.0/16", "199.27.72.9"],
    "ipv6_addresses": ["2a04:4e40::/32"],
}

MOCK_GOOGLE_JSON: Dict[str, Any] = {
    "syncToken": "1700000000000",
    "creationTime": "2024-01-01T00:00:00.000000",
    "prefixes": [
        {"ipv4Prefix": "34.80.0.0/15", "service": "Google Cloud", "scope": "asia-east1"},
        {"ipv6Prefix": "2600:1900:4010::/44", "service": "Google Cloud", "scope": "asia-east1"},
        {"ipv4Prefix": "35.185.128.0/19", "service": "Google Cloud", "scope": "asia-east1"},
    ],
}

MOCK_CLOUDFLARE_TEXT = "173.245.48.0/20\n103.21.244.0/22\n104.16.0.0/13\n"

MOCK_CACHEFLY_TEXT = "205.234.175.0/24\r\n66.254.120.0/24\r\n"

MOCK_BGPVIEW_AKAMAI_12222: Dict[str, Any] = {
    "status": "ok",
    "status_message": "Query was successful",
    "data": {
        "ipv4_prefixes": [
            {"prefix": "23.32.0.0/20", "ip": "23.32.0.0", "cidr": 20, "name": "AKAMAI"},
            {"prefix": "", "ip": "", "cidr": 0, "name": "MISSING"},
        ],
        "ipv6_prefixes": [{"prefix": "2a02:26f0::/48", "ip": "2a02:26f0::", "cidr": 48}],
    },
    "@meta": {"time_zone": "UTC", "api_version": 1, "execution_time": "12.3 ms"},
}

MOCK_BGPVIEW_AKAMAI_16625: Dict[str, Any] = {
    "status": "ok",
    "data": {
        "ipv4_prefixes": [{"prefix": "23.192.0.0/11", "ip": "23.192.0.0", "cidr": 11}],
        "ipv6_prefixes": [],
    },
}

MOCK_BGPVIEW_DDOSGUARD: Dict[str, Any] = {
    "status": "ok",
    "data": {
        "ipv4_prefixes": [
            {"prefix": "186.2.160.0/20", "ip": "186.2.160.0", "cidr": 20},
            {"prefix": "185.178.208.0/22", "ip": "185.178.208.0", "cidr": 22},
        ],
        "ipv6_prefixes": [],
    },
}

MOCK_BGPVIEW_EMPTY: Dict[str, Any] = {
    "status": "ok",
    "data": {"ipv4_prefixes": [], "ipv6_prefixes": []},
}

MOCK_BGPVIEW_ERROR: Dict[str, Any] = {
    "status": "error",
    "status_message": "Malformed input",
}


def make_response(status_code: int = 200, text: str = "", json_data: Any = None) -> Mock:
    """Build a mock ``requests.Response``.

    ``json()`` raises ValueError when no JSON payload is given, like a real
    response with a non-JSON body.
    """
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status = Mock()
    if json_data is None:
        response.json = Mock(side_effect=ValueError("Expecting value: line 1 column 1 (char 0)"))
    else:
        response.json = Mock(return_value=json_data)
    return response


def mock_provider_response(url: str, **kwargs: Any) -> Mock:
    """Return the canned response for a provider or BGPView URL.

    Unknown URLs return 404 so a test never silently depends on the network.
    """
    if "amazonaws.com" in url:
        return make_response(json_data=MOCK_AMAZON_JSON)
    if "fastly.com" in url:
        return make_response(json_data=MOCK_FASTLY_JSON)
    if "gstatic.com" in url:
        return make_response(json_data=MOCK_GOOGLE_JSON)
    if "cloudflare.com" in url:
        return make_response(text=MOCK_CLOUDFLARE_TEXT)
    if "cachefly" in url:
        return make_response(text=MOCK_CACHEFLY_TEXT)
    if "bgpview" in url:
        if "AS12222" in url:
            return make_response(json_data=MOCK_BGPVIEW_AKAMAI_12222)
        if "AS16625" in url:
            return make_response(json_data=MOCK_BGPVIEW_AKAMAI_16625)
        if "AS57724" in url:
            return make_response(json_data=MOCK_BGPVIEW_DDOSGUARD)
        return make_response(json_data=MOCK_BGPVIEW_EMPTY)
    return make_response(status_code=404, text="Not Found")
