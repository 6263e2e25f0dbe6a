import socket

import pytest

from pydogstatsd.client import DogStatsd


class RecordingTransport(object):
    def __init__(self):
        self.lines = []
        self.flushed = 0

    def report(self, line):
        self.lines.append(line)

    def flush(self, payload):
        self.lines.append(payload)

    def flush_buffer(self):
        self.flushed += 1

    def close(self):
        pass


class RecordingFlush(object):
    """Stands in for UdpTransport below a BufferedTransport."""

    def __init__(self):
        self.datagrams = []
        self.closed = False

    def flush(self, payload):
        self.datagrams.append(payload)

    def close(self):
        self.closed = True


class UdpServer:
    def __init__(self):
        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.socket.bind(('127.0.0.1', 0))
        self.socket.settimeout(2)
        self.port = self.socket.getsockname()[1]

    def get_message(self):
        return self.socket.recv(65535).decode('utf-8')

    def close(self):
        self.socket.close()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def statsd_client(transport):
    return DogStatsd(transport=transport)


@pytest.fixture
def udp_server():
    server = UdpServer()
    try:
        yield server
    finally:
        server.close()


@pytest.fixture
def sink():
    return RecordingFlush()
