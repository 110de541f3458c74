# tailscale_notifier/errors.py


class TailscaleNotifierError(Exception):
    """Base class for every fatal error raised during a run."""


class ConfigError(TailscaleNotifierError):
    pass


class InventoryError(TailscaleNotifierError):
    """The device list could not be fetched or parsed."""


class NotificationError(TailscaleNotifierError):
    """Pushover rejected the message or could not be reached."""
