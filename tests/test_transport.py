import socket

import mock

from pydogstatsd.client import DogStatsd
from pydogstatsd.transport import BufferedTransport, UdpTransport


def test_udp_transport_sends_one_datagram(udp_server):
    transport = UdpTransport('127.0.0.1', udp_server.port)
    transport.report('test.request.number:1|c')
    assert udp_server.get_message() == 'test.request.number:1|c'
    transport.flush('a:1|c\nb:2|c')
    assert udp_server.get_message() == 'a:1|c\nb:2|c'
    transport.close()


def test_udp_socket_is_non_blocking():
    transport = UdpTransport()
    assert transport.sock.gettimeout() == 0.0
    assert transport.sock is transport.sock
    transport.close()


def test_udp_transport_swallows_socket_errors():
    transport = UdpTransport()
    sock = mock.Mock()
    sock.sendto.side_effect = socket.error('unreachable')
    transport._sock = sock
    transport.flush('a:1|c')
    sock.sendto.assert_called_once_with(b'a:1|c', ('127.0.0.1', 8125))


def test_buffer_flushes_after_exceeding_max(sink):
    transport = BufferedTransport(sink, max=2)
    transport.report('a:1|c')
    transport.report('b:1|c')
    assert sink.datagrams == []
    assert transport.length == 2
    transport.report('c:1|c')
    assert sink.datagrams == ['a:1|c\nb:1|c\nc:1|c']
    assert transport.buffer == []
    assert transport.length == 0

    transport.report('d:1|c')
    assert transport.buffer == ['d:1|c']
    assert len(sink.datagrams) == 1


def test_batched_datagram_splits_back_into_lines(sink):
    transport = BufferedTransport(sink, max=3)
    lines = ['a:1|c', 'b:2|g|#env:prod', 'c:3|ms|@0.5', '_sc|db|0']
    for line in lines:
        transport.report(line)
    assert sink.datagrams[0].split('\n') == lines


def test_set_max_applies_on_next_append(sink):
    transport = BufferedTransport(sink)
    assert transport.max == 50
    for i in range(3):
        transport.report('a:%d|c' % i)
    transport.set_max(1)
    assert sink.datagrams == []
    transport.report('a:3|c')
    assert sink.datagrams == ['a:0|c\na:1|c\na:2|c\na:3|c']


def test_flush_buffer_on_empty_buffer_sends_nothing(sink):
    transport = BufferedTransport(sink)
    transport.flush_buffer()
    assert sink.datagrams == []
    transport.report('a:1|c')
    transport.flush_buffer()
    assert sink.datagrams == ['a:1|c']


def test_close_flushes_and_closes(sink):
    transport = BufferedTransport(sink)
    transport.report('a:1|c')
    transport.close()
    assert sink.datagrams == ['a:1|c']
    assert sink.closed


def test_buffered_over_udp(udp_server):
    transport = BufferedTransport(UdpTransport('127.0.0.1', udp_server.port), max=1)
    transport.report('a:1|c')
    transport.report('b:1|c')
    assert udp_server.get_message() == 'a:1|c\nb:1|c'
    transport.close()


def test_udp_transport_drops_unencodable_payload():
    transport = UdpTransport()
    sock = mock.Mock()
    transport._sock = sock
    transport.flush('a\ud800:1|c')
    assert not sock.sendto.called


def test_client_with_unencodable_stat_does_not_raise(udp_server):
    client = DogStatsd('127.0.0.1', udp_server.port)
    client.increment('a\ud800')
    client.increment('b')
    assert udp_server.get_message() == 'b:1|c'
    client.close()
