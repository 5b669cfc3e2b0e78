from __future__ import annotations

import argparse
import asyncio
import logging

from launchgate import __version__ as LAUNCHGATE_VERSION
from launchgate.common.config import AppPaths, GateConfig
from launchgate.common.logging_utils import configure_logging
from launchgate.common.state import GateStateStore, JsonFileStore
from launchgate.common.types import GateDecision, WebSession
from launchgate.gate.poller import GatePoller
from launchgate.web.session_controller import NavigationState, WebSessionController
from launchgate.web.web_view import RequestsWebView


log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LaunchGate launcher")
    parser.add_argument("--check-only", action="store_true", help="Resolve the gate, print the route and exit.")
    parser.add_argument("--reset", action="store_true", help="Clear all persisted state and exit.")
    parser.add_argument("--log-level", default="INFO", help="Log level.")
    return parser


def describe(decision: GateDecision) -> str:
    if isinstance(decision, WebSession):
        return f"web {decision.destination_url}"
    return "native"


def run_web_session(cfg: GateConfig, gate_store: GateStateStore, storage: JsonFileStore) -> int:
    web_view = RequestsWebView(cfg)
    controller = WebSessionController(cfg, gate_store, storage, web_view)
    try:
        if not controller.start():
            return 0
        if controller.state is NavigationState.LOADED:
            print(f"web {web_view.current_url}")
        else:
            # Failures leave the saved destination in place for the next launch.
            print(f"web-failed {controller.last_error}")
        return 0
    finally:
        controller.close()
        web_view.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    paths = AppPaths.default()
    paths.ensure_layout()
    configure_logging(paths.logs_dir, level=args.log_level)
    log.info("LaunchGate %s starting", LAUNCHGATE_VERSION)

    cfg = GateConfig.from_env()
    storage = JsonFileStore(paths.state_dir)
    gate_store = GateStateStore(storage)

    if args.reset:
        gate_store.clear()
        return 0

    poller = GatePoller(cfg, gate_store)
    try:
        decision = asyncio.run(poller.resolve())
    except KeyboardInterrupt:
        log.warning("Gate resolution interrupted.")
        return 1
    finally:
        poller.client.close()

    if args.check_only:
        print(describe(decision))
        return 0

    if isinstance(decision, WebSession):
        return run_web_session(cfg, gate_store, storage)

    log.info("Routing to the native experience.")
    print("native")
    return 0
