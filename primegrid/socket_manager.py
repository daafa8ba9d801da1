"""Owns the listener and every connected client of the server."""

from __future__ import annotations

import socket
import threading

from .client_handler import ClientHandler
from .listener import Listener
from .protocol import DEFAULT_PORT
from .server_logic import Range, ServerInterface


class SocketManager:
    """Connects clients to a :class:`ServerInterface` and cleans up after them."""

    def __init__(
        self,
        server: ServerInterface,
        host: str = "",
        port: int = DEFAULT_PORT,
    ) -> None:
        self.server = server
        self.listener = Listener(self.add_client, host, port)
        self._clients: list[tuple[ClientHandler, threading.Thread]] = []
        self._clients_lock = threading.Lock()
        self._close_condition = threading.Condition()
        self._clients_to_close = 0
        self._closing = False
        self._listen_thread: threading.Thread | None = None
        self._closing_thread: threading.Thread | None = None

    @property
    def client_count(self) -> int:
        """Number of clients not yet cleaned up."""
        with self._clients_lock:
            return len(self._clients)

    def start(self) -> None:
        """Start accepting clients and cleaning up closed ones."""
        self.listener.create_socket()
        self._listen_thread = threading.Thread(
            target=self.listener.start_listening, name="listener", daemon=True
        )
        self._listen_thread.start()
        self._closing_thread = threading.Thread(
            target=self._closing_loop, name="client-closer", daemon=True
        )
        self._closing_thread.start()

    def stop(self) -> None:
        """Stop listening and close every client connection."""
        self.listener.close_connection()
        if self._listen_thread is not None:
            self._listen_thread.join()

        with self._clients_lock:
            for handler, _ in self._clients:
                handler.needs_closed_by_parent = True

        with self._close_condition:
            self._closing = True
            self._close_condition.notify_all()
        if self._closing_thread is not None:
            self._closing_thread.join()
        else:
            self._reap()

    def request_work(self) -> Range:
        """Ask the server for the next range to search."""
        return self.server.request_work()

    def found_primes(self, primes: list[int], search_range: Range | None) -> None:
        """Pass primes found by a client to the server."""
        self.server.primes_received(primes, search_range)

    def search_failed(self, search_range: Range) -> None:
        """Return a range whose search was abandoned to the server."""
        self.server.work_failed(search_range)

    def client_disconnected(self) -> None:
        """Wake the clean-up thread after a client has closed."""
        with self._close_condition:
            self._clients_to_close += 1
            self._close_condition.notify_all()

    def add_client(self, sock: socket.socket) -> None:
        """Start a handler thread for a newly accepted client socket."""
        handler = ClientHandler(
            sock,
            self.request_work,
            self.found_primes,
            self.search_failed,
            self.client_disconnected,
        )
        thread = threading.Thread(
            target=handler.run, name=f"client-{handler.key}", daemon=True
        )
        with self._clients_lock:
            self._clients.append((handler, thread))
            thread.start()

    def _reap(self) -> None:
        with self._clients_lock:
            finished = [pair for pair in self._clients if pair[0].needs_closed_by_parent]
            self._clients = [
                pair for pair in self._clients if not pair[0].needs_closed_by_parent
            ]
        for handler, thread in finished:
            handler.close_connection()
            if thread is not threading.current_thread():
                thread.join()

    def _closing_loop(self) -> None:
        while True:
            with self._close_condition:
                self._close_condition.wait_for(
                    lambda: self._clients_to_close > 0 or self._closing
                )
                self._clients_to_close = 0
                closing = self._closing
            self._reap()
            if closing:
                return