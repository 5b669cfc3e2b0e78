from __future__ import annotations

import logging
from http.cookiejar import Cookie, CookieJar
from typing import Any

from requests.cookies import create_cookie

from launchgate.common.state import KeyValueStore


log = logging.getLogger(__name__)

KEY_COOKIES = "web.cookies"


def _cookie_record(cookie: Cookie) -> dict[str, Any]:
    return {
        "name": cookie.name,
        "value": cookie.value,
        "domain": cookie.domain,
        "path": cookie.path,
        "secure": bool(cookie.secure),
        "expires": cookie.expires,
        "discard": bool(cookie.discard),
        "version": cookie.version,
        "port": cookie.port,
        # Non-standard attributes such as HttpOnly and SameSite.
        "rest": dict(getattr(cookie, "_rest", {})),
    }


def snapshot_cookies(jar: CookieJar) -> list[dict[str, Any]]:
    return [_cookie_record(cookie) for cookie in jar]


def restore_cookies(jar: CookieJar, records: list[dict[str, Any]]) -> int:
    restored = 0
    for record in records:
        try:
            cookie = create_cookie(
                str(record["name"]),
                record.get("value"),
                domain=str(record.get("domain") or ""),
                path=str(record.get("path") or "/"),
                secure=bool(record.get("secure", False)),
                expires=record.get("expires"),
                discard=bool(record.get("discard", False)),
                version=int(record.get("version") or 0),
                port=record.get("port"),
                rest=dict(record.get("rest") or {}),
            )
        except (KeyError, TypeError, ValueError) as exc:
            log.warning("Skipping malformed persisted cookie: %s", exc)
            continue
        jar.set_cookie(cookie)
        restored += 1
    return restored


def cookie_header(jar: CookieJar) -> str:
    return "; ".join(f"{cookie.name}={cookie.value or ''}" for cookie in jar)


class CookiePersistence:
    """Owner of the persisted cookie slot."""

    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def save(self, jar: CookieJar) -> list[dict[str, Any]]:
        records = snapshot_cookies(jar)
        self.storage.set(KEY_COOKIES, records)
        log.debug("Persisted %d cookies", len(records))
        return records

    def load(self) -> list[dict[str, Any]]:
        raw = self.storage.get(KEY_COOKIES, [])
        if not isinstance(raw, list):
            log.warning("Persisted cookie slot is not a list; ignoring it.")
            return []
        return [r for r in raw if isinstance(r, dict)]

    def restore_into(self, jar: CookieJar) -> int:
        count = restore_cookies(jar, self.load())
        if count:
            log.info("Restored %d persisted cookies", count)
        return count
