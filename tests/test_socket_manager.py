import socket
import threading
import time

import pytest

from primegrid.protocol import (
    MessageType,
    decode_header,
    decode_range,
    encode_close,
    encode_primes,
    recv_exact,
)
from primegrid.server_logic import ServerInterface
from primegrid.socket_manager import SocketManager


class _FakeServer(ServerInterface):
    def __init__(self):
        self.next_low = 100
        self.found = []
        self.failed = []
        self._lock = threading.Lock()

    def request_work(self):
        with self._lock:
            search_range = (self.next_low, self.next_low + 9)
            self.next_low += 10
            return search_range

    def work_failed(self, search_range):
        with self._lock:
            self.failed.append(search_range)

    def primes_received(self, primes, search_range):
        with self._lock:
            self.found.append((list(primes), search_range))


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def _read_range(sock):
    msg_type, size = decode_header(recv_exact(sock, 3))
    return msg_type, decode_range(recv_exact(sock, size * 8), size)


@pytest.fixture
def started():
    server = _FakeServer()
    manager = SocketManager(server, "127.0.0.1", 0)
    manager.start()
    assert manager.listener.listening.wait(5)
    yield manager, server
    manager.stop()


def test_request_work_delegates():
    server = _FakeServer()
    manager = SocketManager(server, "127.0.0.1", 0)
    first = manager.request_work()
    second = manager.request_work()
    assert first == (100, 109)
    assert second[0] == first[1] + 1


def test_found_primes_and_search_failed_delegate():
    server = _FakeServer()
    manager = SocketManager(server, "127.0.0.1", 0)
    manager.found_primes([2, 3], (2, 3))
    manager.search_failed((4, 9))
    assert server.found == [([2, 3], (2, 3))]
    assert server.failed == [(4, 9)]


def test_add_client_serves_socket_until_stopped():
    server = _FakeServer()
    manager = SocketManager(server, "127.0.0.1", 0)
    server_end, client_end = socket.socketpair()
    client_end.settimeout(5)
    manager.add_client(server_end)
    client_end.sendall(encode_primes([7]))
    msg_type, received = _read_range(client_end)
    assert msg_type is MessageType.RANGE
    assert received == (100, 109)
    assert server.found == [([7], None)]
    assert manager.client_count == 1
    manager.stop()
    assert manager.client_count == 0
    assert recv_exact(client_end, 3) == encode_close()
    client_end.close()


def test_closed_client_is_cleaned_up(started):
    manager, server = started
    with socket.create_connection(manager.listener.address, timeout=5) as client:
        client.sendall(encode_primes([]))
        _read_range(client)
        assert manager.client_count == 1
        client.sendall(encode_close())
        assert recv_exact(client, 3) == encode_close()
    _wait_for(lambda: manager.client_count == 0)
    assert manager.client_count == 0
    assert server.failed == []


def test_dropped_client_returns_its_range(started):
    manager, server = started
    client = socket.create_connection(manager.listener.address, timeout=5)
    client.sendall(encode_primes([]))
    _, received = _read_range(client)
    client.close()
    _wait_for(lambda: len(server.failed) > 0)
    assert server.failed == [received]
    _wait_for(lambda: manager.client_count == 0)
    assert manager.client_count == 0


def test_stop_closes_connected_clients():
    server = _FakeServer()
    manager = SocketManager(server, "127.0.0.1", 0)
    manager.start()
    assert manager.listener.listening.wait(5)
    clients = []
    for _ in range(2):
        client = socket.create_connection(manager.listener.address, timeout=5)
        client.sendall(encode_primes([]))
        _read_range(client)
        clients.append(client)
    assert manager.client_count == 2
    manager.stop()
    assert manager.client_count == 0
    assert manager.listener.closing
    closing_messages = [recv_exact(client, 3) for client in clients]
    for client in clients:
        client.close()
    assert closing_messages == [encode_close(), encode_close()]
    assert server.failed == []