"""Client that searches ranges handed out by the prime search server."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import threading

from .prime_search import PrimeSearch
from .protocol import (
    DEFAULT_ADDRESS,
    DEFAULT_PORT,
    HEADER_SIZE,
    VALUE_SIZE,
    MessageType,
    ProtocolError,
    decode_header,
    decode_range,
    encode_close,
    encode_primes,
    recv_exact,
)

log = logging.getLogger(__name__)


class Connection:
    """A connection to the server that reports primes and receives new ranges.

    Each round sends the primes found so far (none at first), waits for the
    next range, and searches it.  The exchange runs on a background thread
    until the server closes the connection or :meth:`stop` is called.
    """

    def __init__(
        self,
        host: str = DEFAULT_ADDRESS,
        port: int = DEFAULT_PORT,
        worker: PrimeSearch | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.worker = worker if worker is not None else PrimeSearch()
        self.sock: socket.socket | None = None
        self.closing = False
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Whether the exchange with the server is still going on."""
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "Connection":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _connect(self) -> socket.socket:
        try:
            return socket.create_connection((self.host, self.port))
        except OSError as exc:
            raise ConnectionError(
                f"failed to connect to server {self.host}:{self.port}: {exc}"
            ) from exc

    def start(self) -> None:
        """Connect to the server and start exchanging work with it."""
        if self.sock is not None:
            raise RuntimeError("connection has already been started")
        self.closing = False
        self.sock = self._connect()
        self._thread = threading.Thread(
            target=self._server_comms, args=(self.sock,), name="server-comms", daemon=True
        )
        self._thread.start()

    def _server_comms(self, sock: socket.socket) -> None:
        try:
            while not self.closing:
                primes = self.worker.take_primes()
                log.info("Sending server the following primes: %s", primes)
                sock.sendall(encode_primes(primes))

                msg_type, payload_size = decode_header(recv_exact(sock, HEADER_SIZE))
                if msg_type is MessageType.CLOSE_CONNECTION:
                    log.info("Server closed the connection")
                    return
                payload = recv_exact(sock, payload_size * VALUE_SIZE)
                search_range = decode_range(payload, payload_size)
                log.info("Received work range: %s", search_range)
                self.worker.new_range(search_range)
                self.worker.search()
        except (OSError, ProtocolError) as exc:
            if not self.closing:
                log.warning("Communication with server failed: %s", exc)
        finally:
            log.info("Stopped communication loop")

    def stop(self) -> None:
        """Tell the server the connection is closing and wait for the exchange to end."""
        sock, self.sock = self.sock, None
        if sock is None:
            return
        self.closing = True
        try:
            sock.sendall(encode_close())
        except OSError:
            pass
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()
        if self._thread is not None:
            self._thread.join()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="primegrid-client",
        description="Search ranges of numbers for primes on behalf of a server.",
    )
    parser.add_argument("--host", default=DEFAULT_ADDRESS, help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server port")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run a client; a line on standard input stops it."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    connection = Connection(args.host, args.port)
    try:
        connection.start()
    except ConnectionError as exc:
        print(exc, file=sys.stderr)
        return 1
    print("Press Enter to stop the client.")
    try:
        sys.stdin.readline()
    except KeyboardInterrupt:
        pass
    finally:
        connection.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())