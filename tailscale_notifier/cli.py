# tailscale_notifier/cli.py
import argparse

def build_parser():
    # No options: credentials live in the config file, scheduling in cron.
    return argparse.ArgumentParser(
        prog="tailscale-notifier",
        description="Send a Pushover alert for Tailscale devices whose keys are expiring or expired",
    )
