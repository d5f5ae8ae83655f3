#!/usr/bin/env python3

import os
import signal
import logging
import argparse
import asyncio
import configparser

from log import setup_logging
from geofix import (
    LifecycleBridge,
    LocationOptions,
    reset_shared_location_manager,
    shared_location_manager,
)
from geofix.gpsd import GpsdProvider
from geofix.telemetry import LogObserver, RetryObserver, TelemetryObserver

APP_NAME = "geofix-agent"

config = configparser.ConfigParser()
logger = logging.getLogger()

instance_id = os.getenv("GEOFIX_INSTANCE_ID")


def create_telemetry_observer() -> TelemetryObserver | None:
    if not config.has_section("telemetry"):
        return None

    section = config["telemetry"]
    if not section.get("base_url"):
        return None

    return TelemetryObserver(
        section["base_url"],
        section.get("token", ""),
        section.get("instance_id", ""),
    )


async def main():
    logger.info(f"Starting {APP_NAME}")

    loop = asyncio.get_running_loop()

    provider = GpsdProvider(
        config.get("gpsd", "host", fallback="127.0.0.1"),
        config.getint("gpsd", "port", fallback=2947),
    )
    options = LocationOptions.from_config(
        config["location"] if config.has_section("location") else None
    )
    manager = shared_location_manager(provider, options=options)

    log_observer = LogObserver()
    manager.add_observer(log_observer)

    retry_observer = RetryObserver(manager)
    manager.add_observer(retry_observer)

    telemetry_observer = create_telemetry_observer()
    manager.add_observer(telemetry_observer)

    stop_event = asyncio.Event()
    loop.add_signal_handler(signal.SIGTERM, stop_event.set)

    bridge = LifecycleBridge(manager)
    loop.add_signal_handler(signal.SIGUSR1, bridge.application_did_become_active)
    loop.add_signal_handler(signal.SIGUSR2, bridge.application_did_enter_background)

    try:
        manager.start_updating_location()
        await stop_event.wait()
        logger.info("Agent is gracefully shutting down")

    except asyncio.CancelledError:
        logger.info("Agent is gracefully shutting down")
    finally:
        loop.remove_signal_handler(signal.SIGTERM)
        loop.remove_signal_handler(signal.SIGUSR1)
        loop.remove_signal_handler(signal.SIGUSR2)

        retry_observer.close()
        reset_shared_location_manager()

        if telemetry_observer is not None:
            await telemetry_observer.aclose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Location agent driving gpsd acquisition sessions"
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level",
    )
    parser.add_argument(
        "--log-systemd",
        action="store_true",
        help="Enable logging to systemd journal",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.ini",
        help="Specify the configuration file to use",
    )
    parser.add_argument(
        "-i",
        "--instance",
        default=instance_id,
        help="Specify the instance ID to use",
    )
    args = parser.parse_args()

    setup_logging(args.log_level, systemd=args.log_systemd, identifier=APP_NAME)

    config.read(args.config)
    if args.instance:
        config["DEFAULT"]["instance_id"] = args.instance

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
