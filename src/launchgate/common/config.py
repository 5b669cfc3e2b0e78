from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


BLANK_PAGE_URL = "about:blank"


@dataclass(frozen=True)
class AppPaths:
    install_root: Path
    state_dir: Path
    logs_dir: Path

    @classmethod
    def default(cls) -> "AppPaths":
        override_root = os.environ.get("LAUNCHGATE_HOME", "").strip()
        if override_root:
            install_root = Path(override_root)
        else:
            data_home = (
                os.environ.get("LOCALAPPDATA", "").strip()
                or os.environ.get("XDG_DATA_HOME", "").strip()
                or str(Path.home() / ".local" / "share")
            )
            install_root = Path(data_home) / "LaunchGate"
        return cls.under(install_root)

    @classmethod
    def under(cls, install_root: Path) -> "AppPaths":
        return cls(
            install_root=install_root,
            state_dir=install_root / "state",
            logs_dir=install_root / "logs",
        )

    def ensure_layout(self) -> None:
        for path in (self.install_root, self.state_dir, self.logs_dir):
            path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class GateConfig:
    endpoint_url: str = "https://wallen-eatery.space/ios-dfm-1/server.php"
    access_code: str = "Bs2675kDjkb5Ga"
    expected_token: str = "GJDFHDFHFDJGSDAGKGHK"
    max_attempts: int = 30
    request_timeout_seconds: float = 30.0
    max_backoff_seconds: int = 30
    load_watchdog_seconds: float = 5.0
    page_load_timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "GateConfig":
        defaults = cls()
        return cls(
            endpoint_url=os.environ.get("LAUNCHGATE_ENDPOINT_URL", defaults.endpoint_url),
            access_code=os.environ.get("LAUNCHGATE_ACCESS_CODE", defaults.access_code),
            expected_token=os.environ.get("LAUNCHGATE_EXPECTED_TOKEN", defaults.expected_token),
            max_attempts=int(os.environ.get("LAUNCHGATE_MAX_ATTEMPTS", str(defaults.max_attempts))),
            request_timeout_seconds=float(
                os.environ.get("LAUNCHGATE_REQUEST_TIMEOUT", str(defaults.request_timeout_seconds))
            ),
            max_backoff_seconds=int(os.environ.get("LAUNCHGATE_MAX_BACKOFF", str(defaults.max_backoff_seconds))),
            load_watchdog_seconds=float(
                os.environ.get("LAUNCHGATE_LOAD_WATCHDOG", str(defaults.load_watchdog_seconds))
            ),
            page_load_timeout_seconds=float(
                os.environ.get("LAUNCHGATE_PAGE_LOAD_TIMEOUT", str(defaults.page_load_timeout_seconds))
            ),
        )
