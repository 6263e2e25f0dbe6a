import time
from functools import wraps

from pydogstatsd import encoder
from pydogstatsd.encoder import GAUGE, HISTOGRAM, SET, TIMING
from pydogstatsd.events import EventClient
from pydogstatsd.log import logger
from pydogstatsd.servicecheck import format_service_check
from pydogstatsd.transport import BufferedTransport, UdpTransport

__all__ = ['DogStatsd', 'Timer', 'batched']


class DogStatsd(object):
    """A client for dogstatsd.

    Every metric call is turned into one line per stat and handed to the
    transport. With the default ``UdpTransport`` each line is its own
    datagram; pass a ``BufferedTransport`` (or use ``batched()``) to pack
    lines together.
    """

    def __init__(self, host='127.0.0.1', port=8125, api_key=None, application_key=None,
                 endpoint='https://app.datadoghq.com', transport=None, prefix=None):
        self.transport = transport or UdpTransport(host, port)
        self.events = EventClient(api_key, application_key, endpoint)
        self._prefix = prefix

    def __enter__(self):
        return self

    def __exit__(self, typ, value, tb):
        self.close()

    def timer(self, stat, sample_rate=1, tags=None):
        return Timer(self, stat, sample_rate, tags)

    def timing(self, stat, delta, sample_rate=1, tags=None):
        """Send timing information. `delta` is in milliseconds."""
        self._send_one(stat, delta, TIMING, sample_rate, tags)

    def microtiming(self, stat, seconds, sample_rate=1, tags=None):
        """Same as `timing` but takes `seconds`."""
        self.timing(stat, seconds * 1000, sample_rate, tags)

    def gauge(self, stat, value, sample_rate=1, tags=None):
        self._send_one(stat, value, GAUGE, sample_rate, tags)

    def histogram(self, stat, value, sample_rate=1, tags=None):
        self._send_one(stat, value, HISTOGRAM, sample_rate, tags)

    def set(self, stat, value, sample_rate=1, tags=None):
        """Count unique occurrences of `value`."""
        self._send_one(stat, value, SET, sample_rate, tags)

    def increment(self, stats, sample_rate=1, tags=None):
        """Increment one or more counters by 1."""
        self.update_stats(stats, 1, sample_rate, tags)

    def decrement(self, stats, sample_rate=1, tags=None):
        """Decrement one or more counters by 1."""
        self.update_stats(stats, -1, sample_rate, tags)

    def update_stats(self, stats, delta=1, sample_rate=1, tags=None):
        """Change one or more counters by `delta`.

        `stats` is a stat name or a list of names; each name gets its own
        line with the same value.
        """
        if not isinstance(delta, int) or isinstance(delta, bool):
            logger.warning('dropping counter update with non integer delta', stats=stats, delta=delta)
            return
        self.send(encoder.counter_data(stats, delta), sample_rate, tags)

    def send(self, data, sample_rate=1, tags=None):
        """Sample, tag and report `data`, a mapping of stat to `value|type`.

        Each stat that survives sampling is reported as its own line. Nothing
        is reported when sampling drops every stat.
        """
        sampled = encoder.sample(data, sample_rate)
        if not sampled:
            return
        for line in encoder.encode(sampled, tags, self._prefix):
            self.transport.report(line)

    def service_check(self, name, status, tags=None, hostname=None, message=None, timestamp=None):
        """Send a service check status, one of the `servicecheck` status codes."""
        msg = format_service_check(name, status, tags, hostname, message, timestamp)
        if msg is not None:
            self.transport.report(msg)

    def event(self, title, vals=None):
        """Post an event to the Datadog HTTP API, see `EventClient.submit`."""
        return self.events.submit(title, vals)

    def set_max(self, max):
        if not isinstance(self.transport, BufferedTransport):
            raise TypeError('set_max needs a BufferedTransport, got {!r}'.format(self.transport))
        self.transport.set_max(max)

    def flush_buffer(self):
        self.transport.flush_buffer()

    def close(self):
        self.transport.close()

    def _send_one(self, stat, value, metric_type, sample_rate, tags):
        if not encoder.valid_value(value):
            logger.warning('dropping metric with invalid value', stat=stat, value=value)
            return
        self.send({stat: encoder.metric_value(value, metric_type)}, sample_rate, tags)


def batched(host='127.0.0.1', port=8125, max=50, **kwargs):
    """A `DogStatsd` that sends its lines in batches of more than `max`."""
    transport = BufferedTransport(UdpTransport(host, port), max=max)
    return DogStatsd(host, port, transport=transport, **kwargs)


class Timer(object):
    """A context manager/decorator for DogStatsd.timing()."""

    def __init__(self, client, stat, sample_rate=1, tags=None):
        self.client = client
        self.stat = stat
        self.sample_rate = sample_rate
        self.tags = tags
        self.ms = None

    def __call__(self, f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            with Timer(self.client, self.stat, self.sample_rate, self.tags):
                return f(*args, **kwargs)
        return wrapper

    def __enter__(self):
        self.start = time.monotonic()
        return self

    def __exit__(self, typ, value, tb):
        dt = time.monotonic() - self.start
        self.ms = int(round(1000 * dt))  # Convert to ms.
        self.client.timing(self.stat, self.ms, self.sample_rate, self.tags)
