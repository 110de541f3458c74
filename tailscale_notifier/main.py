# tailscale_notifier/main.py

from datetime import datetime, timezone
import sys

from .cli import build_parser
from .config import Config
from .errors import TailscaleNotifierError
from .logging import ConsoleLog

from .services.expiration_policy import ExpirationPolicy
from .services.notifiers.pushover import PushoverNotifier
from .services.tailscale_client import TailscaleAPIClient


def run(app_cfg, log, now=None, session=None, notifier=None) -> str:
    """Fetch, classify and notify once. Returns the message that was sent."""
    client = TailscaleAPIClient(app_cfg.tailscale_api, log, session=session)
    devices = client.fetch_devices(app_cfg.tailnet_name, app_cfg.tailscale_token)

    policy = ExpirationPolicy(log)
    result = policy.classify(devices, now or datetime.now(timezone.utc))
    message = policy.select_message(result)

    if notifier is None:
        notifier = PushoverNotifier(app_cfg.pushover_token, app_cfg.pushover_user_key, log)
    notifier.send_message(message)
    return message


def main(argv=None) -> int:
    parser = build_parser()
    parser.parse_args(argv)

    # Defaults until the config says otherwise, so config errors are visible.
    log = ConsoleLog().setup()

    try:
        config_path = Config.default_path()
        log.info("Loading config from path: %s", config_path)
        app_cfg = Config.load(config_path)

        log = ConsoleLog(
            level=app_cfg.logging.console_level,
            quiet=app_cfg.logging.console_quiet,
            debug_modules=app_cfg.logging.debug_modules,
        ).setup()

        run(app_cfg, log)
    except TailscaleNotifierError as exc:
        cause = exc.__cause__
        if cause is not None:
            log.error("%s (caused by %s: %s)", exc, type(cause).__name__, cause)
        else:
            log.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
