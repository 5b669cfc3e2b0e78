from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable

from launchgate.common.config import BLANK_PAGE_URL, GateConfig
from launchgate.common.state import GateStateStore, KeyValueStore
from launchgate.common.types import DeviceContext
from launchgate.common.url_checks import is_usable_destination
from launchgate.gate.fingerprint import build_device_context, build_user_agent
from launchgate.web.cookies import CookiePersistence, cookie_header
from launchgate.web.web_view import WebView


log = logging.getLogger(__name__)


class NavigationState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class WebSessionController:
    """Shows the resolved web destination and keeps its session alive across launches.

    Navigation runs ``IDLE -> LOADING -> LOADED | FAILED`` driven by the
    ``on_start``/``on_finish``/``on_fail`` events the web view reports. A
    watchdog timer only logs loads that take longer than the configured
    limit; it never interrupts them.
    """

    def __init__(
        self,
        cfg: GateConfig,
        gate_store: GateStateStore,
        storage: KeyValueStore,
        web_view: WebView,
        device: DeviceContext | None = None,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ):
        self.cfg = cfg
        self.gate_store = gate_store
        self.cookies = CookiePersistence(storage)
        self.web_view = web_view
        self.user_agent = build_user_agent(device or build_device_context())
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._state = NavigationState.IDLE
        self._watchdog: Any = None
        self.last_error: BaseException | None = None

        # Session continuity depends on cookies being back before the first request.
        self.cookies.restore_into(self.web_view.cookie_jar)

    @property
    def state(self) -> NavigationState:
        with self._lock:
            return self._state

    def start(self) -> bool:
        destination = self.gate_store.saved_destination()
        if not is_usable_destination(destination):
            log.info("No saved web destination; staying on the blank surface.")
            return False
        self.navigate(str(destination))
        return True

    def navigate(self, url: str) -> None:
        headers = {"User-Agent": self.user_agent}
        header = cookie_header(self.web_view.cookie_jar)
        if header:
            headers["Cookie"] = header
        log.info("Loading web destination %s", url)
        self.web_view.load(url, headers, self)

    def on_start(self) -> None:
        with self._lock:
            self._state = NavigationState.LOADING
            self.last_error = None
            self._cancel_watchdog()
            timer = self._timer_factory(self.cfg.load_watchdog_seconds, self._on_watchdog)
            timer.daemon = True
            self._watchdog = timer
            timer.start()

    def on_finish(self, url: str) -> None:
        with self._lock:
            self._state = NavigationState.LOADED
            self._cancel_watchdog()
            if url and url != BLANK_PAGE_URL:
                self.gate_store.update_destination(url)
            self.cookies.save(self.web_view.cookie_jar)
        log.info("Web destination loaded: %s", url)

    def on_fail(self, error: BaseException) -> None:
        with self._lock:
            self._state = NavigationState.FAILED
            self._cancel_watchdog()
            self.last_error = error
        log.warning("Web navigation failed: %s", error)

    def close(self) -> None:
        with self._lock:
            self._cancel_watchdog()

    def _on_watchdog(self) -> None:
        with self._lock:
            still_loading = self._state is NavigationState.LOADING
        if still_loading:
            log.warning("Page still loading after %ss", self.cfg.load_watchdog_seconds)

    def _cancel_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None
