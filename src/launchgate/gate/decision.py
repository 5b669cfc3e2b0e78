from __future__ import annotations

import hmac

from launchgate.common.types import GateDecision, NativeApp, WebSession
from launchgate.common.url_checks import is_absolute_url


SEPARATOR = "#"


def split_token_link(raw: str) -> tuple[str, str] | None:
    token, sep, link = str(raw).partition(SEPARATOR)
    if not sep or not token or not link:
        return None
    return token, link


def parse_decision(raw: str, expected_token: str) -> GateDecision | None:
    """Decode a ``TOKEN#URL`` gate response.

    ``None`` means the text could not even be split and the caller should
    retry. Any split response is terminal: the web destination only when the
    token matches and the link is an absolute URL, the native app otherwise.
    """
    parsed = split_token_link(raw)
    if parsed is None:
        return None
    token, link = parsed
    token_ok = hmac.compare_digest(token.encode("utf-8"), str(expected_token).encode("utf-8"))
    if token_ok and is_absolute_url(link):
        return WebSession(destination_url=link)
    return NativeApp()
