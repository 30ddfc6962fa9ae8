#!/usr/bin/env python3
"""
run_gateway.py — Start the gateway and serve provider receivers over HTTP.

Usage:
    python run_gateway.py [config.yaml]
    python run_gateway.py --port 9000 [config.yaml]

Flow:
  1. Load config and bootstrap the gateway
  2. Mount every provider under /<alias>/
  3. Serve until interrupted
"""

import asyncio
import logging
import sys
from pathlib import Path

from smsgateway.config import bootstrap


async def run_gateway(config_path: str = "config/gateway.yaml", port: int | None = None):
    """Boot the gateway and serve it."""
    gateway = bootstrap(config_path)
    logging.getLogger().setLevel(gateway.config.log_level)
    await gateway.listen(port=port)


def main():
    args = sys.argv[1:]

    port = None
    if "--port" in args:
        i = args.index("--port")
        try:
            port = int(args[i + 1])
        except (IndexError, ValueError):
            print("Usage: run_gateway.py [--port N] [config.yaml]")
            sys.exit(2)
        del args[i:i + 2]

    config_path = args[0] if args else "config/gateway.yaml"

    if not Path(config_path).exists():
        print(f"Config not found: {config_path}")
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run_gateway(config_path, port=port))
    except KeyboardInterrupt:
        print("\nInterrupted")


if __name__ == "__main__":
    main()
