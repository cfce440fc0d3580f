"""Main entry point for smart-suspend"""

import logging
import os
import sys
import threading

from .commands import get_command_suggestion, is_valid_cli_command
from .config import SuspendConfig, get_config
from .config_watcher import ConfigWatcher
from .engine import LoggingEngine
from .host import PollingPowerMonitor, PsutilNetworkMonitor
from .notification_dispatcher import ReasonNotifier
from .rules import match_one, parse_rules
from .service import SuspendService


def print_help():
    print("\nsmart-suspend - suspend the proxy engine on trusted networks or while idle")
    print("=" * 60)
    print("\nAvailable commands:")
    print("  /run               - Watch networks and power state until Ctrl-C")
    print("  /check [rules]     - Evaluate current addresses against the rules once")
    print("  /status            - Show the effective configuration")
    print("  /help              - Show this help")
    print("\nSettings come from ~/.smart-suspend/suspend.yaml and the")
    print("SMART_SUSPEND_ENABLED, SMART_SUSPEND_IPS, DOZE_SUSPEND_ENABLED variables.\n")


def run_service(config: SuspendConfig):
    """Run the suspend service until interrupted"""
    logging.basicConfig(
        level=os.getenv("SMART_SUSPEND_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    service = SuspendService(
        engine=LoggingEngine(),
        network_monitor=PsutilNetworkMonitor(config.network_poll_interval),
        power_monitor=PollingPowerMonitor(poll_interval=config.power_poll_interval),
        config=config,
        on_reason_changed=ReasonNotifier(config),
    )
    config_watcher = ConfigWatcher(service)

    stop_event = threading.Event()
    service.start()
    config_watcher.start()
    print("Watching for network and power changes (Ctrl-C to stop)")
    try:
        while not stop_event.wait(1.0):
            pass
    finally:
        config_watcher.stop()
        service.stop()


def check_command(config: SuspendConfig, raw_rules: str | None = None) -> bool:
    """One-shot evaluation of the current addresses against the rules"""
    rules = parse_rules(raw_rules if raw_rules is not None else config.smart_suspend_ips)
    monitor = PsutilNetworkMonitor()

    addresses = sorted({link.address for link in monitor.link_addresses() if not link.is_loopback})

    print("\nCurrent IPv4 addresses:")
    for address in addresses or ["(none)"]:
        print(f"  {address}")

    print("\nRules:")
    if rules.is_empty:
        print("  (none)")

    matched = False
    for rule in rules.rules:
        hits = [address for address in addresses if match_one(address, rule)]
        matched = matched or bool(hits)
        print(f"  {rule.raw:20s} -> {', '.join(hits) if hits else 'no match'}")

    print(f"\nSmart suspend would {'SUSPEND' if matched else 'NOT suspend'} the engine\n")
    return matched


def status_command(config: SuspendConfig):
    print("\nsmart-suspend configuration:")
    print("=" * 40)
    for key, value in config.model_dump().items():
        print(f"{key:28s}: {value}")
    print()


def main():
    """Main entry point"""
    command = sys.argv[1] if len(sys.argv) > 1 else "/help"

    if not command.startswith("/"):
        print("Error: Commands must start with /")
        print(f"Did you mean: /{command}?")
        print("\nRun 'smart-suspend /help' to see available commands")
        sys.exit(1)

    command = command[1:]

    if not is_valid_cli_command(command):
        print(get_command_suggestion(f"/{command}"))
        sys.exit(1)

    if command == "help":
        print_help()
        return

    config = get_config()

    if command == "run":
        try:
            run_service(config)
        except KeyboardInterrupt:
            print("\nShutting down...")
    elif command == "check":
        raw_rules = sys.argv[2] if len(sys.argv) > 2 else None
        check_command(config, raw_rules)
    elif command == "status":
        status_command(config)


if __name__ == "__main__":
    main()
