from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DeviceContext:
    os_name_version: str
    preferred_language: str
    hardware_model_id: str
    region_code: str | None = None


@dataclass(frozen=True)
class GateRequest:
    access_code: str
    device: DeviceContext

    def query_params(self) -> list[tuple[str, str]]:
        params = [
            ("p", self.access_code),
            ("os", self.device.os_name_version),
            ("lng", self.device.preferred_language),
            ("devicemodel", self.device.hardware_model_id),
        ]
        if self.device.region_code:
            params.append(("country", self.device.region_code))
        return params


@dataclass(frozen=True)
class NativeApp:
    pass


@dataclass(frozen=True)
class WebSession:
    destination_url: str


GateDecision = Union[NativeApp, WebSession]


@dataclass(frozen=True)
class GateState:
    resolved: bool = False
    use_web_session: bool = False
    saved_destination_url: str | None = None
