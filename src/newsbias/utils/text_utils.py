"""Text processing utilities."""

import html
import re
from urllib.parse import parse_qs, unquote, urlencode, urlparse, urlunparse

from newsbias.utils.exceptions import InvalidURLError

# Common tracking parameters stripped from canonical URLs
TRACKING_PARAMS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
    "gclid",
    "ref",
    "source",
    "from",
}


def validate_url(url: str) -> str:
    """Validate an article URL.

    Args:
        url: URL to validate

    Returns:
        The stripped URL

    Raises:
        InvalidURLError: If the URL is not an absolute http(s) URL
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("URL is required")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: {url}") from e

    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(f"Unsupported URL scheme: {url}")
    if not parsed.hostname or "." not in parsed.hostname:
        raise InvalidURLError(f"URL has no valid host: {url}")
    if re.search(r"\s", url):
        raise InvalidURLError(f"URL contains whitespace: {url}")

    return url


def normalize_url(url: str) -> str:
    """Normalize URL by removing tracking parameters and fragments.

    The normalized URL is the canonical key used for deduplication.

    Args:
        url: URL to normalize

    Returns:
        Normalized URL
    """
    parsed = urlparse(url.strip())

    query_params = parse_qs(parsed.query, keep_blank_values=True)
    clean_params = {
        k: v for k, v in query_params.items() if k.lower() not in TRACKING_PARAMS
    }
    clean_query = urlencode(sorted(clean_params.items()), doseq=True) if clean_params else ""

    normalized = urlunparse(
        (
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path,
            parsed.params,
            clean_query,
            "",  # Remove fragment
        )
    )

    if normalized.endswith("/"):
        normalized = normalized[:-1]

    return normalized


def extract_domain(url: str) -> str:
    """Extract domain from URL, without a leading "www.".

    Args:
        url: URL to parse

    Returns:
        Domain name
    """
    netloc = urlparse(url).netloc.lower()
    netloc = netloc.split("@")[-1].split(":")[0]
    if netloc.startswith("www."):
        netloc = netloc[4:]
    return netloc


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to maximum length, appending suffix when cut.

    Args:
        text: Text to truncate
        max_length: Maximum length of kept text (suffix excluded)
        suffix: Suffix to add when truncating

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[:max_length].rstrip() + suffix


def clean_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip."""
    return re.sub(r"\s+", " ", text).strip()


def strip_html(text: str) -> str:
    """Remove tags and decode entities from an HTML fragment."""
    text = re.sub(r"<[^>]*>", " ", text)
    text = html.unescape(text)
    return clean_whitespace(text)


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len(text.split())


def url_path_topic(url: str) -> str:
    """Derive a readable topic from URL path segments.

    Keeps segments longer than three characters, turns separators into
    spaces and drops digits, so ``/india/modi-unveils-budget-2024/123.cms``
    becomes ``"india modi unveils budget cms"``.

    Args:
        url: Article URL

    Returns:
        Topic phrase, possibly empty
    """
    path = unquote(urlparse(url).path)
    parts = [part for part in path.split("/") if len(part) > 3]
    topic = " ".join(parts)
    topic = re.sub(r"[-_.]+", " ", topic)
    topic = re.sub(r"\d+", "", topic)
    return clean_whitespace(topic)
