from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, List, Optional

import requests

from tailscale_notifier.config import TailscaleAPIConfig
from tailscale_notifier.errors import InventoryError
from tailscale_notifier.models.device import Device


# RFC 3339 section 5.6 ``date-time``; fromisoformat alone also takes other ISO 8601 forms.
RFC3339_DATE_TIME = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def parse_rfc3339(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime."""
    if not isinstance(value, str):
        raise InventoryError(f"Expected RFC 3339 timestamp string, got {value!r}")
    if not RFC3339_DATE_TIME.fullmatch(value):
        raise InventoryError(f"Invalid RFC 3339 timestamp {value!r}")
    try:
        parsed = datetime.fromisoformat(value.upper())
    except ValueError as exc:
        raise InventoryError(f"Invalid RFC 3339 timestamp {value!r}") from exc
    return parsed.astimezone(timezone.utc)


class TailscaleAPIClient:
    """Thin Tailscale API v2 wrapper; every failure is fatal for the run."""

    API_BASE_DEFAULT = "https://api.tailscale.com"
    DEVICES_PATH = "/api/v2/tailnet/{tailnet}/devices"

    def __init__(self, cfg: TailscaleAPIConfig, log, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.log = log
        self.session = session or requests.Session()
        self.base_url = (cfg.base_url or self.API_BASE_DEFAULT).rstrip("/")

    # ------------------------------------------------------------------
    def devices_url(self, tailnet_name: str) -> str:
        return self.base_url + self.DEVICES_PATH.format(tailnet=tailnet_name)

    def _get(self, url: str, token: str) -> Any:
        headers = {"Authorization": f"Bearer {token}"}
        try:
            resp = self.session.get(url, headers=headers, timeout=self.cfg.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise InventoryError(f"Tailscale API request to {url} failed: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise InventoryError(f"Tailscale API {url} returned non-JSON payload") from exc

    # ------------------------------------------------------------------
    def fetch_devices(self, tailnet_name: str, bearer_token: str) -> List[Device]:
        url = self.devices_url(tailnet_name)
        self.log.info("Fetching %s...", url)
        payload = self._get(url, bearer_token)

        if not isinstance(payload, dict) or not isinstance(payload.get("devices"), list):
            raise InventoryError("Tailscale API response has no 'devices' list")

        devices: List[Device] = []
        for index, entry in enumerate(payload["devices"]):
            if not isinstance(entry, dict):
                raise InventoryError(f"Device entry #{index} is not an object")
            hostname = entry.get("hostname")
            if not isinstance(hostname, str):
                raise InventoryError(f"Device entry #{index} has no hostname")
            if "expires" not in entry:
                raise InventoryError(f"Device {hostname} has no 'expires' field")
            devices.append(Device(hostname=hostname, expires=parse_rfc3339(entry["expires"])))

        self.log.debug("Tailscale API returned %d devices", len(devices))
        return devices
