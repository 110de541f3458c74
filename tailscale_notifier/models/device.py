# tailscale_notifier/models/device.py
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Device:
    hostname: str
    expires: datetime     # timezone-aware, UTC


@dataclass
class ClassificationResult:
    now: datetime
    expiring: list[Device] = field(default_factory=list)
    expired: list[Device] = field(default_factory=list)
