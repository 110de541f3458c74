# tailscale_notifier/services/expiration_policy.py

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from tailscale_notifier.models.device import ClassificationResult, Device


EXPIRY_WINDOW_DAYS = 15

_ONE_DAY = timedelta(days=1)


def days_until_expiration(expires: datetime, now: datetime) -> int:
    """Whole days between ``now`` and ``expires``, truncated toward zero.

    A key that lapsed 20 hours ago is 0 days out, not -1.
    """
    delta = expires - now
    whole_days = abs(delta) // _ONE_DAY
    return whole_days if delta >= timedelta(0) else -whole_days


class ExpirationPolicy:
    """
    Buckets devices by key expiry and picks the notification text.

    - days >= window        -> ignored
    - 0 <= days < window    -> expiring (0 means "today")
    - days < 0              -> expired
    """

    def __init__(self, log, window_days: int = EXPIRY_WINDOW_DAYS):
        self.log = log
        self.window_days = window_days

    def classify(self, devices: Iterable[Device], now: datetime) -> ClassificationResult:
        result = ClassificationResult(now=now)

        for device in devices:
            days = days_until_expiration(device.expires, now)
            if days >= self.window_days:
                continue

            if days > 0:
                self.log.info("%s expires in %d days", device.hostname, days)
                result.expiring.append(device)
            elif days == 0:
                self.log.info("%s expires today", device.hostname)
                result.expiring.append(device)
            else:
                self.log.info("%s expired %d days ago", device.hostname, abs(days))
                result.expired.append(device)

        return result

    def select_message(self, result: ClassificationResult) -> str:
        # Expired devices always win over expiring ones.
        if len(result.expired) == 1:
            return f"{result.expired[0].hostname} has expired!"
        if len(result.expired) > 1:
            return f"{len(result.expired)} devices are expired!"

        if len(result.expiring) == 1:
            device = result.expiring[0]
            days = days_until_expiration(device.expires, result.now)
            if days == 0:
                return f"{device.hostname} is expiring today!"
            return f"{device.hostname} is expiring in {days} days!"

        return f"{len(result.expiring)} devices are expiring soon!"
