"""Accepts incoming client connections."""

from __future__ import annotations

import logging
import os
import socket
import threading
from typing import Callable

from .protocol import DEFAULT_PORT

log = logging.getLogger(__name__)

_ACCEPT_POLL = 0.2


class Listener:
    """Listens on a TCP port and hands each accepted socket to ``add_client``."""

    def __init__(
        self,
        add_client: Callable[[socket.socket], None],
        host: str = "",
        port: int = DEFAULT_PORT,
    ) -> None:
        self.add_client = add_client
        self.host = host
        self.port = port
        self.sock: socket.socket | None = None
        self.address: tuple[str, int] | None = None
        self.listening = threading.Event()
        self.closing = False

    def create_socket(self) -> None:
        """Create the listening socket."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            if self.closing:
                return
            raise RuntimeError(f"failed to create listener socket: {exc}") from exc
        if os.name == "posix":
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock = sock

    def start_listening(self) -> None:
        """Bind, listen and accept connections until closed."""
        if self.sock is None:
            if self.closing:
                return
            raise RuntimeError("create_socket() must be called before listening")
        sock = self.sock
        try:
            sock.bind((self.host, self.port))
            sock.listen(socket.SOMAXCONN)
        except OSError as exc:
            sock.close()
            if self.closing:
                return
            raise RuntimeError(
                f"failed to listen on {self.host or '*'}:{self.port}: {exc}"
            ) from exc

        host, port = sock.getsockname()[:2]
        self.address = (host, port)
        sock.settimeout(_ACCEPT_POLL)
        log.info("Started listening on port %d", port)
        self.listening.set()

        while not self.closing:
            try:
                conn, _ = sock.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self.closing:
                    break
                sock.close()
                raise RuntimeError(f"accepting a connection failed: {exc}") from exc
            conn.setblocking(True)
            self.add_client(conn)

    def close_connection(self) -> None:
        """Stop accepting and close the listening socket."""
        self.closing = True
        if self.sock is not None:
            self.sock.close()