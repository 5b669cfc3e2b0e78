from launchgate.gate.decision import parse_decision
from launchgate.gate.fingerprint import build_device_context, build_gate_url
from launchgate.gate.poller import GateClient, GatePoller

__all__ = [
    "GateClient",
    "GatePoller",
    "build_device_context",
    "build_gate_url",
    "parse_decision",
]
