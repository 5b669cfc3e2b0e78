from __future__ import annotations

import logging
from http.cookiejar import CookieJar
from typing import Mapping, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from launchgate.common.config import GateConfig


log = logging.getLogger(__name__)


class NavigationListener(Protocol):
    def on_start(self) -> None: ...

    def on_finish(self, url: str) -> None: ...

    def on_fail(self, error: BaseException) -> None: ...


class WebView(Protocol):
    @property
    def cookie_jar(self) -> CookieJar: ...

    def load(self, url: str, headers: Mapping[str, str], listener: NavigationListener) -> None: ...


class RequestsWebView:
    """Headless web content surface backed by a ``requests`` session.

    Reports navigation through the listener events; cookies set by pages
    accumulate in the session jar.
    """

    def __init__(self, cfg: GateConfig, max_retries: int = 2):
        self.cfg = cfg
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            connect=max_retries,
            read=max_retries,
            status=max_retries,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"GET", "HEAD"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.current_url: str | None = None
        self.last_body: str = ""

    @property
    def cookie_jar(self) -> CookieJar:
        return self.session.cookies

    def load(self, url: str, headers: Mapping[str, str], listener: NavigationListener) -> None:
        listener.on_start()
        timeout = self.cfg.page_load_timeout_seconds
        try:
            resp = self.session.get(url, headers=dict(headers), timeout=(timeout, timeout))
        except requests.RequestException as exc:
            listener.on_fail(exc)
            return
        # Error pages still render and may set cookies, so they complete the navigation.
        if resp.status_code >= 400:
            log.info("Page %s answered with status %s", resp.url, resp.status_code)
        self.current_url = str(resp.url)
        self.last_body = resp.text
        listener.on_finish(self.current_url)

    def close(self) -> None:
        self.session.close()
