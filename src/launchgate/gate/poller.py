from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from launchgate.common.config import GateConfig
from launchgate.common.state import GateStateStore
from launchgate.common.types import DeviceContext, GateDecision, NativeApp, WebSession
from launchgate.common.url_checks import is_usable_destination
from launchgate.gate.decision import parse_decision
from launchgate.gate.fingerprint import build_device_context, build_gate_url


log = logging.getLogger(__name__)


class GateClient:
    """Single-shot HTTP access to the gate endpoint.

    The adapter never retries on its own; every retry is an attempt counted by
    :class:`GatePoller`.
    """

    def __init__(self, cfg: GateConfig):
        self.cfg = cfg
        self.session = requests.Session()
        retry = Retry(total=0, connect=0, read=0, status=0, redirect=5, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    @property
    def _timeout(self) -> tuple[float, float]:
        # Connect plus read must fit inside the poller's per-attempt bound.
        half = self.cfg.request_timeout_seconds / 2
        return (half, half)

    def fetch_text(self, url: str) -> str | None:
        """Return the trimmed response body, or None when the attempt is inconclusive."""
        try:
            resp = self.session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            log.info("Gate request failed: %s", exc)
            return None
        if not 200 <= resp.status_code < 300:
            log.info("Gate request returned status %s", resp.status_code)
            return None
        try:
            text = resp.content.decode("utf-8").strip()
        except UnicodeDecodeError:
            log.info("Gate response body is not UTF-8 text (%d bytes)", len(resp.content))
            return None
        if not text:
            log.info("Gate response body is empty")
            return None
        return text

    def close(self) -> None:
        self.session.close()


class GatePoller:
    def __init__(
        self,
        cfg: GateConfig,
        store: GateStateStore,
        client: GateClient | None = None,
        device_provider: Callable[[], DeviceContext] = build_device_context,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.cfg = cfg
        self.store = store
        self.client = client or GateClient(cfg)
        self.device_provider = device_provider
        self._sleep = sleep
        self._task: asyncio.Task[GateDecision] | None = None
        self.attempts_made = 0

    def backoff_seconds(self, attempt: int) -> int:
        return min(self.cfg.max_backoff_seconds, max(1, attempt))

    async def resolve(self) -> GateDecision:
        # Later and concurrent callers join the first resolution instead of polling again.
        if self._task is None:
            self._task = asyncio.ensure_future(self._resolve())
        return await self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _resolve(self) -> GateDecision:
        saved = self.store.saved_destination()
        if is_usable_destination(saved):
            log.info("Resuming saved web destination without polling.")
            return WebSession(destination_url=str(saved))

        for attempt in range(1, self.cfg.max_attempts + 1):
            decision = await self._attempt(attempt)
            if decision is not None:
                self.store.save(decision)
                return decision
            if attempt < self.cfg.max_attempts:
                delay = self.backoff_seconds(attempt)
                log.debug("Gate attempt %d inconclusive, retrying in %ss", attempt, delay)
                await self._sleep(delay)

        log.warning("Gate undecided after %d attempts; falling back to native app.", self.cfg.max_attempts)
        return NativeApp()

    async def _attempt(self, attempt: int) -> GateDecision | None:
        self.attempts_made = attempt
        url = build_gate_url(self.cfg, self.device_provider())
        log.info("Gate attempt %d/%d", attempt, self.cfg.max_attempts)
        worker = asyncio.ensure_future(asyncio.to_thread(self.client.fetch_text, url))
        try:
            raw = await asyncio.wait_for(asyncio.shield(worker), timeout=self.cfg.request_timeout_seconds)
        except asyncio.TimeoutError:
            log.info("Gate request timed out after %ss", self.cfg.request_timeout_seconds)
            # The worker thread cannot be interrupted; the next attempt waits for it to settle.
            await worker
            return None
        if raw is None:
            return None

        decision = parse_decision(raw, self.cfg.expected_token)
        if decision is None:
            log.info("Gate response has no token separator; treating as inconclusive.")
        return decision
