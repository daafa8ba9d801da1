"""Command that runs the prime search server until Enter is pressed."""

from __future__ import annotations

import argparse
import logging
import sys

from .fileio import PRIME_FILE, RANGE_FILE
from .protocol import DEFAULT_PORT
from .server_logic import SEARCH_SIZE, ServerLogic
from .socket_manager import SocketManager


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="primegrid-server",
        description="Hand out ranges to prime search clients and store results.",
    )
    parser.add_argument("--host", default="", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port")
    parser.add_argument("--ranges-file", default=RANGE_FILE, help="searched ranges")
    parser.add_argument("--primes-file", default=PRIME_FILE, help="primes found")
    parser.add_argument(
        "--search-size", type=int, default=SEARCH_SIZE, help="numbers per range"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the server; a line on standard input stops it."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    server = ServerLogic(args.ranges_file, args.primes_file, args.search_size)
    server.start()

    manager = SocketManager(server, args.host, args.port)
    manager.start()
    print("Press Enter to stop the server.")
    try:
        sys.stdin.readline()
    except KeyboardInterrupt:
        pass
    finally:
        manager.stop()
        server.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())