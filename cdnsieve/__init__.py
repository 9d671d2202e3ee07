"""CDN range aggregation and IP classification."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["get_version"]


def get_version() -> str:
    """Return the installed package version or a development marker."""
    try:
        return version("cdnsieve")
    except PackageNotFoundError:
        return "0.0.0-dev"
