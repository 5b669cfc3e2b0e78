from __future__ import annotations

import locale
import os
import platform
from typing import Mapping

import requests

from launchgate.common.config import GateConfig
from launchgate.common.types import DeviceContext, GateRequest


GENERIC_DEVICE_CLASS = "Device"
DEFAULT_LANGUAGE = "en"

_LOCALE_ENV_VARS = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")


def _split_locale(name: str) -> tuple[str, str | None]:
    # "pt_BR.UTF-8@euro" -> ("pt", "BR"); "de-AT" -> ("de", "AT")
    base = name.split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    if base.upper() in {"C", "POSIX"}:
        return "", None
    parts = [p for p in base.split("_") if p]
    if not parts:
        return "", None
    language = parts[0].lower()
    region = None
    for part in parts[1:]:
        if (len(part) == 2 and part.isalpha()) or (len(part) == 3 and part.isdigit()):
            region = part.upper()
            break
    return language, region


def _preferred_locale(environ: Mapping[str, str]) -> str | None:
    for var in _LOCALE_ENV_VARS:
        value = environ.get(var, "").strip()
        if not value:
            continue
        # LANGUAGE is a colon separated priority list.
        first = value.split(":", 1)[0].strip()
        if first and first not in {"C", "POSIX"} and not first.startswith("C."):
            return first
    try:
        name = locale.getlocale()[0]
    except ValueError:
        name = None
    if name and name not in {"C", "POSIX"}:
        return name
    return None


def _hardware_model(environ: Mapping[str, str], machine: str | None) -> str:
    override = environ.get("LAUNCHGATE_DEVICE_MODEL", "").strip()
    if override:
        return override
    model = (machine if machine is not None else platform.machine()).strip()
    return model or GENERIC_DEVICE_CLASS


def build_device_context(
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
    release: str | None = None,
    machine: str | None = None,
    locale_name: str | None = None,
) -> DeviceContext:
    """Describe the running device for the gate request.

    Every field degrades to a default instead of failing. Arguments override
    the values read from ``platform``/``locale`` and exist for callers that
    already know them.
    """
    env = os.environ if environ is None else environ
    system_name = (system if system is not None else platform.system()).strip() or "Unknown"
    system_release = (release if release is not None else platform.release()).strip()
    os_string = f"{system_name} {system_release}".strip()

    name = locale_name if locale_name is not None else _preferred_locale(env)
    language, region = _split_locale(name or "")
    return DeviceContext(
        os_name_version=os_string,
        preferred_language=language or DEFAULT_LANGUAGE,
        hardware_model_id=_hardware_model(env, machine),
        region_code=region,
    )


def build_gate_url(cfg: GateConfig, device: DeviceContext) -> str:
    request = GateRequest(access_code=cfg.access_code, device=device)
    prepared = requests.Request("GET", cfg.endpoint_url, params=request.query_params()).prepare()
    return str(prepared.url)


def build_user_agent(device: DeviceContext) -> str:
    version = device.os_name_version.rsplit(" ", 1)[-1] if " " in device.os_name_version else "0"
    return (
        f"Mozilla/5.0 (iPhone; CPU iPhone OS {version.replace('.', '_')} like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Mobile"
    )
