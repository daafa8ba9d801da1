"""Server side of one client connection."""

from __future__ import annotations

import itertools
import logging
import socket
import threading
from typing import Callable

from .protocol import (
    HEADER_SIZE,
    VALUE_SIZE,
    MessageType,
    ProtocolError,
    decode_header,
    decode_primes,
    encode_close,
    encode_range,
    recv_exact,
)

Range = tuple[int, int]

log = logging.getLogger(__name__)


class ClientHandler:
    """Talks to one connected client: collects its primes and hands out ranges.

    The callbacks connect the handler to whoever owns it: ``request_work``
    returns the next range to send, ``found_primes`` receives the primes a
    client reports together with the range it was given, ``search_failed``
    receives a range whose search was abandoned, and ``client_disconnected``
    is told when the connection closes.
    """

    _keys = itertools.count(1)

    def __init__(
        self,
        sock: socket.socket,
        request_work: Callable[[], Range],
        found_primes: Callable[[list[int], Range | None], None],
        search_failed: Callable[[Range], None],
        client_disconnected: Callable[[], None],
    ) -> None:
        self.sock = sock
        self.request_work = request_work
        self.found_primes = found_primes
        self.search_failed = search_failed
        self.client_disconnected = client_disconnected
        self.key = next(ClientHandler._keys)
        self.last_range: Range | None = None
        self.last_sent = b""
        self.currently_running = True
        self.needs_closed_by_parent = False
        self._close_lock = threading.Lock()
        self._closed = False

    def close_connection(self) -> None:
        """Tell the client the connection is closing and close the socket.

        Only the first call has any effect.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self.currently_running = False
        try:
            self.sock.sendall(encode_close())
        except OSError:
            pass
        self.needs_closed_by_parent = True
        self.client_disconnected()
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.sock.close()

    def comms_failed(self) -> None:
        """Give back the outstanding range and close the connection."""
        log.warning("Client connection unexpectedly closed: %d.", self.key)
        if self.last_range is not None:
            self.search_failed(self.last_range)
        self.close_connection()

    def _abort(self) -> None:
        if self.currently_running:
            self.comms_failed()
        else:
            self.close_connection()

    def run(self) -> None:
        """Exchange primes for new ranges until either side closes."""
        while self.currently_running:
            try:
                msg_type, payload_size = decode_header(
                    recv_exact(self.sock, HEADER_SIZE)
                )
                if msg_type is MessageType.CLOSE_CONNECTION:
                    log.info("Received close connection from client: %d", self.key)
                    self.close_connection()
                    return
                payload = (
                    recv_exact(self.sock, payload_size * VALUE_SIZE)
                    if payload_size
                    else b""
                )
                primes = decode_primes(payload, payload_size)
            except (OSError, ProtocolError):
                self._abort()
                return

            log.info("Received primes from client #%d: %s", self.key, primes)
            self.found_primes(primes, self.last_range)

            self.last_range = self.request_work()
            self.last_sent = encode_range(self.last_range)
            try:
                self.sock.sendall(self.last_sent)
            except OSError:
                self._abort()
                return
            log.info("Sent client search range: %s", self.last_range)
        self.close_connection()