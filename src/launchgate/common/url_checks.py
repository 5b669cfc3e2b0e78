from __future__ import annotations

from urllib.parse import urlparse

from launchgate.common.config import BLANK_PAGE_URL


def is_absolute_url(url: str) -> bool:
    text = str(url or "")
    if not text or text != text.strip() or any(ch.isspace() for ch in text):
        return False
    try:
        parsed = urlparse(text)
        # Accessing .port raises on a malformed port such as "host:abc".
        parsed.port
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.hostname)


def is_usable_destination(url: str | None) -> bool:
    """A saved destination is usable when it is set, not the blank page, and absolute."""
    if not url or url == BLANK_PAGE_URL:
        return False
    return is_absolute_url(url)
