# tailscale_notifier/services/notifiers/pushover.py

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict

from tailscale_notifier.errors import NotificationError


class PushoverNotifier:
    """Minimal Pushover client; a message that cannot be delivered is an error."""

    API_URL = "https://api.pushover.net/1/messages.json"
    TIMEOUT = 10

    def __init__(self, token: str, user_key: str, log):
        self.token = token
        self.user_key = user_key
        self.log = log

    # ------------------------------------------------------------------
    def _decode(self, body: bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise NotificationError("Pushover returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            raise NotificationError(f"Pushover returned unexpected payload: {payload!r}")
        return payload

    def _post(self, message: str) -> Dict[str, Any]:
        data = urllib.parse.urlencode(
            {
                "token": self.token,
                "user": self.user_key,
                "message": message,
            }
        ).encode("utf-8")

        req = urllib.request.Request(self.API_URL, data=data)

        try:
            with urllib.request.urlopen(req, timeout=self.TIMEOUT) as resp:
                body = resp.read()
        except urllib.error.HTTPError as exc:
            # Pushover explains 4xx rejections in a JSON body.
            detail = exc.read().decode("utf-8", errors="replace")
            raise NotificationError(f"Pushover rejected message (HTTP {exc.code}): {detail}") from exc
        except urllib.error.URLError as exc:
            raise NotificationError(f"Failed to reach Pushover: {exc.reason}") from exc
        except OSError as exc:
            raise NotificationError(f"Pushover request failed: {exc}") from exc

        return self._decode(body)

    # ------------------------------------------------------------------
    def send_message(self, message: str) -> Dict[str, Any]:
        payload = self._post(message)
        if payload.get("status") != 1:
            errors = payload.get("errors") or payload
            raise NotificationError(f"Pushover reported failure: {errors}")

        self.log.info("[Pushover] Sent notification: %s", message)
        self.log.info("[Pushover] Response: %s", payload)
        return payload
