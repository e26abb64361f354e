"""URL helpers shared by the storage bindings."""

from typing import Optional
from urllib.parse import urlsplit


def is_web_uri(value: Optional[str]) -> bool:
    """Return True when value is an absolute http(s) URL with a host."""
    if not value or not isinstance(value, str):
        return False
    value = value.strip()
    if any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def apply_cdn(url: str, cdn_url: Optional[str]) -> str:
    """Swap the scheme and host of a signed URL for the CDN's.

    The path and query (including the signature) are preserved unchanged. A
    path prefix on the CDN URL is kept ahead of the object path.

    Args:
        url: Signed URL as produced by the provider SDK
        cdn_url: Validated CDN base URL, or None to leave url untouched

    Returns:
        URL pointing at the CDN
    """
    if not cdn_url:
        return url

    parts = urlsplit(url)
    path_and_query = parts.path or "/"
    if parts.query:
        path_and_query = f"{path_and_query}?{parts.query}"
    return f"{cdn_url.rstrip('/')}{path_and_query}"
