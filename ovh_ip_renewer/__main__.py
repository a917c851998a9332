import argparse
import asyncio
import signal
import sys
from typing import Optional, Sequence

from ovh.exceptions import InvalidRegion  # type: ignore
from pydantic import ValidationError

from .client.public_ip_client import PublicIPClient
from .config import Config
from .dns.dns import ZoneClientError
from .dns.ovh import OVHZoneClient
from .dns.reconciler import RecordReconciler
from .driver import Driver
from .logger import logger, setup_logging

# -d takes zerolog style levels, kept for existing deployments
DEBUG_FLAG_LEVELS = {
    -1: "DEBUG",
    0: "DEBUG",
    1: "INFO",
    2: "WARNING",
    3: "ERROR",
    4: "CRITICAL",
    5: "CRITICAL",
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ovh-ip-renewer",
        description="keep the A/AAAA records of an ovh domain on the host's public ip",
    )
    parser.add_argument(
        "-d",
        "--debug",
        type=int,
        choices=sorted(DEBUG_FLAG_LEVELS),
        default=None,
        help="log level from -1 (trace) to 5 (panic), overrides logging_level",
    )
    return parser.parse_args(argv)


def _request_stop(sig: signal.Signals, stop_event: asyncio.Event):
    logger.info(f"received termination signal {sig.name}")
    stop_event.set()


async def main(config: Config) -> int:
    try:
        zone_client = OVHZoneClient(
            config.domain,
            config.ovh_endpoint,
            config.ovh_app_key,
            config.ovh_app_secret,
            config.ovh_consumer_key,
            timeout=config.request_timeout,
        )
    except InvalidRegion as e:
        logger.critical(f"failed to create ovh client: {e}")
        return 1

    try:
        await zone_client.check_connectivity()
    except ZoneClientError as e:
        logger.critical(f"failed to establish connection to ovh api: {e}")
        return 1
    logger.info("successfully established connection to ovh api")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_stop, sig, stop_event)

    public_ip_client = PublicIPClient(
        config.ipv4_url, config.ipv6_url, timeout=config.request_timeout
    )
    driver = Driver(
        public_ip_client, RecordReconciler(zone_client), config.poll_interval
    )
    try:
        await driver.run(stop_event)
    finally:
        await public_ip_client.close()

    return 0


def run():
    args = parse_args()
    flag_level = DEBUG_FLAG_LEVELS.get(args.debug) if args.debug is not None else None

    try:
        config = Config()  # type: ignore
    except ValidationError as e:
        setup_logging(flag_level or "INFO")
        # inputs are left out, they hold the ovh credentials
        for error in e.errors(include_input=False):
            location = ".".join(str(part) for part in error["loc"])
            logger.critical(f"invalid configuration: {location}: {error['msg']}")
        sys.exit(1)

    setup_logging(flag_level or config.logging_level)
    sys.exit(asyncio.run(main(config)))


if __name__ == "__main__":
    run()
