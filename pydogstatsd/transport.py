import socket
import threading

__all__ = ['UdpTransport', 'BufferedTransport']


class UdpTransport(object):
    """Fire-and-forget UDP sender, one datagram per report."""

    def __init__(self, host='127.0.0.1', port=8125):
        self._addr = (host, int(port))
        self._sock = None

    @property
    def addr(self):
        return self._addr

    @property
    def sock(self):
        if not self._sock:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            sock.setblocking(False)
            self._sock = sock
        return self._sock

    def report(self, line):
        self.flush(line)

    def flush(self, payload):
        """Send ``payload`` as a single datagram, ignoring any failure."""
        try:
            self.sock.sendto(payload.encode('utf-8'), self._addr)
        except (OSError, UnicodeError):
            # No time for love, Dr. Jones!
            pass

    def flush_buffer(self):
        pass

    def close(self):
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __repr__(self):
        return '<%s [%s:%s]>' % (self.__class__.__name__, self._addr[0], self._addr[1])


class BufferedTransport(object):
    """Collects lines and sends them newline-joined in one datagram.

    The buffer is sent once it holds more than ``max`` lines, so up to
    ``max + 1`` lines go out together. There is no timer: whatever is left
    stays buffered until the next report crosses the threshold or
    ``flush_buffer`` is called.
    """

    def __init__(self, transport=None, max=50):
        self.transport = transport or UdpTransport()
        self.max = max
        self.buffer = []
        self.length = 0
        self._lock = threading.Lock()

    def set_max(self, max):
        self.max = max

    def report(self, line):
        with self._lock:
            self.buffer.append(line)
            self.length += 1
            if self.length > self.max:
                self._flush_locked()

    def flush(self, payload):
        self.transport.flush(payload)

    def flush_buffer(self):
        with self._lock:
            self._flush_locked()

    def _flush_locked(self):
        if not self.buffer:
            return
        data = '\n'.join(self.buffer)
        self.buffer = []
        self.length = 0
        self.transport.flush(data)

    def close(self):
        self.flush_buffer()
        self.transport.close()

    def __repr__(self):
        return '<%s %d/%d via %r>' % (self.__class__.__name__, self.length, self.max, self.transport)
