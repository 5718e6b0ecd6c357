"""
Command line entry point: fetch or create the smart wallet of PRIVATE_KEY.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from smart_wallet_client.config import SmartWalletConfig
from smart_wallet_client.exceptions import SmartWalletError
from smart_wallet_client.resolver import create_or_fetch_smart_wallet

logger = logging.getLogger("smart_wallet_client")


def _positive_seconds(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number of seconds, got {raw!r}") from None
    if not value > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {raw!r}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch the Fuse smart wallet owned by PRIVATE_KEY, creating it if needed"
    )
    parser.add_argument(
        "--timeout",
        type=_positive_seconds,
        default=None,
        help="Seconds to wait for wallet creation (default: FUSE_CREATION_TIMEOUT or forever)",
    )
    parser.add_argument("--no-dotenv", action="store_true", help="Do not load a .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SmartWalletConfig.from_env(dotenv=not args.no_dotenv)
        if args.timeout is not None:
            config = replace(config, creation_timeout=args.timeout)
        wallet = asyncio.run(create_or_fetch_smart_wallet(config))
    except SmartWalletError as e:
        logger.error("%s", e)
        return 1
    except asyncio.TimeoutError:
        logger.error("Timed out waiting for smart wallet creation")
        return 1
    except KeyboardInterrupt:
        return 130

    print(json.dumps(wallet.data, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
