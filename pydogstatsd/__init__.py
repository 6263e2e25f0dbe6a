from pydogstatsd.client import DogStatsd, Timer, batched
from pydogstatsd.servicecheck import OK, WARNING, CRITICAL, UNKNOWN
from pydogstatsd.transport import UdpTransport, BufferedTransport

__version__ = '0.3.0'

__all__ = ['DogStatsd', 'Timer', 'batched', 'UdpTransport', 'BufferedTransport',
           'OK', 'WARNING', 'CRITICAL', 'UNKNOWN']
