from pydogstatsd.encoder import Tags
from pydogstatsd.log import logger

__all__ = ['OK', 'WARNING', 'CRITICAL', 'UNKNOWN', 'STATUSES', 'escape_message', 'format_service_check']

OK = 0
WARNING = 1
CRITICAL = 2
UNKNOWN = 3

STATUSES = (OK, WARNING, CRITICAL, UNKNOWN)


def escape_message(message):
    """Newlines become a literal ``\\n``, then ``m:`` becomes ``m\\:``."""
    return message.replace('\n', '\\n').replace('m:', 'm\\:')


def format_service_check(name, status, tags=None, hostname=None, message=None, timestamp=None):
    """Build a ``_sc`` line.

    Fields always come in this order::

        _sc|<name>|<status>|d:<timestamp>|h:<hostname>|#<tags>|m:<message>

    with each optional field left out when not given. Returns ``None`` for a
    name or status that cannot be sent.
    """
    if not isinstance(name, str) or not name or any(c in name for c in '|\n'):
        logger.warning('dropping service check with invalid name', name=name)
        return None
    if not isinstance(status, int) or isinstance(status, bool) or status not in STATUSES:
        logger.warning('dropping service check with unknown status', name=name, status=status)
        return None
    if hostname is not None and any(c in str(hostname) for c in '|\n'):
        logger.warning('dropping service check with invalid hostname', name=name, hostname=hostname)
        return None
    tag_suffix = Tags.parse(tags).suffix()
    if '\n' in tag_suffix:
        logger.warning('dropping service check with newline in tags', name=name, tags=tag_suffix)
        return None

    msg = '_sc|%s|%s' % (name, status)
    if timestamp is not None:
        msg += '|d:%s' % timestamp
    if hostname is not None:
        msg += '|h:%s' % hostname
    msg += tag_suffix
    if message is not None:
        msg += '|m:%s' % escape_message(message)
    return msg
