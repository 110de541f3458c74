# tailscale_notifier/config.py
from dataclasses import dataclass, field
from pathlib import Path
import configparser
import math

from platformdirs import user_config_dir

from .errors import ConfigError


APP_NAME = "tailscale_notifier"
CONFIG_FILENAME = f"{APP_NAME}.conf"

DEFAULT_CONFIG = """\
[tailscale]
tailnet_name =
tailscale_token =
# base_url = https://api.tailscale.com
# timeout = 20

[pushover]
pushover_token =
pushover_user_key =

[logging]
console_level = INFO
console_quiet = false
debug_modules =
"""


@dataclass
class TailscaleAPIConfig:
    base_url: str = "https://api.tailscale.com"
    timeout: float | None = None


@dataclass
class LoggingConfig:
    console_level: str = "INFO"
    console_quiet: bool = False
    debug_modules: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    tailnet_name: str = ""
    tailscale_token: str = ""
    pushover_token: str = ""
    pushover_user_key: str = ""
    tailscale_api: TailscaleAPIConfig = field(default_factory=TailscaleAPIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class Config:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.parser = configparser.ConfigParser(inline_comment_prefixes=("#",), interpolation=None)
        try:
            read = self.parser.read(self.path, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError) as exc:
            raise ConfigError(f"Config file {self.path} is not valid: {exc}") from exc
        if not read:
            raise ConfigError(f"Config file could not be read: {self.path}")

    @staticmethod
    def default_path() -> Path:
        return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

    @staticmethod
    def write_default(path: str | Path) -> None:
        """Create ``path`` (and its parent directories) holding an empty config."""
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(DEFAULT_CONFIG, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to create config file {target}: {exc}") from exc

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppConfig:
        target = Path(path) if path is not None else cls.default_path()
        try:
            missing = not target.exists()
        except OSError as exc:
            raise ConfigError(f"Unable to access config file {target}: {exc}") from exc
        if missing:
            cls.write_default(target)
            return AppConfig()

        p = cls(target).parser

        def _as_bool(value: str) -> bool:
            return value.strip().lower() == "true"

        def _maybe_float(key: str, raw: str | None) -> float | None:
            if raw is None:
                return None
            raw = raw.strip()
            if not raw:
                return None
            try:
                return float(raw)
            except ValueError as exc:
                raise ConfigError(f"Invalid value for {key}: {raw!r}") from exc

        cfg_kwargs = {}

        # --- Tailscale ---
        api_kwargs = {}
        if "tailscale" in p:
            ts_sec = p["tailscale"]
            if "tailnet_name" in ts_sec:
                cfg_kwargs["tailnet_name"] = ts_sec["tailnet_name"].strip()
            if "tailscale_token" in ts_sec:
                cfg_kwargs["tailscale_token"] = ts_sec["tailscale_token"].strip()
            if ts_sec.get("base_url", "").strip():
                api_kwargs["base_url"] = ts_sec["base_url"].strip()
            if (timeout := _maybe_float("timeout", ts_sec.get("timeout"))) is not None:
                if not math.isfinite(timeout) or timeout <= 0:
                    raise ConfigError(f"timeout must be a positive number of seconds, got {timeout}")
                api_kwargs["timeout"] = timeout
        cfg_kwargs["tailscale_api"] = TailscaleAPIConfig(**api_kwargs)

        # --- Pushover ---
        if "pushover" in p:
            pushover_sec = p["pushover"]
            if "pushover_token" in pushover_sec:
                cfg_kwargs["pushover_token"] = pushover_sec["pushover_token"].strip()
            if "pushover_user_key" in pushover_sec:
                cfg_kwargs["pushover_user_key"] = pushover_sec["pushover_user_key"].strip()

        # --- Logging ---
        logging_kwargs = {}
        if "logging" in p:
            logging_sec = p["logging"]
            if logging_sec.get("console_level", "").strip():
                logging_kwargs["console_level"] = logging_sec["console_level"].strip()
            if "console_quiet" in logging_sec:
                logging_kwargs["console_quiet"] = _as_bool(logging_sec["console_quiet"])
            if "debug_modules" in logging_sec:
                raw = logging_sec["debug_modules"]
                logging_kwargs["debug_modules"] = [x.strip() for x in raw.split(",") if x.strip()]
        cfg_kwargs["logging"] = LoggingConfig(**logging_kwargs)

        return AppConfig(**cfg_kwargs)
