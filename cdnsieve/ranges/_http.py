"""HTTP helpers shared by the range fetchers and the ASN resolver."""

from __future__ import annotations

from typing import Any

import requests

from .models import FetchError


def get_response(url: str, timeout: float) -> requests.Response:
    """Issue one GET request and require an HTTP 200 response.

    Raises:
        FetchError: On transport failure or any status other than 200
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"request to {url} failed: {e}") from e

    if response.status_code != 200:
        raise FetchError(f"unexpected HTTP status {response.status_code} from {url}")
    return response


def load_json(response: requests.Response, url: str) -> Any:
    """Decode a JSON body, raising FetchError if it is not valid JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise FetchError(f"invalid JSON from {url}: {e}") from e
