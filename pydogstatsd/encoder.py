"""
Turning metric calls into DogStatsD lines.

A metric line looks like::

    page.views:1|c|@0.5|#env:prod,region:us

that is ``<stat>:<value>|<type>``, an optional sample rate suffix and an
optional tag section. Several lines can share one datagram when separated by
``\\n``, so nothing in here may produce an embedded newline.
"""
import random
from collections.abc import Mapping

from pydogstatsd.log import logger

__all__ = ['COUNTER', 'GAUGE', 'HISTOGRAM', 'SET', 'TIMING', 'Tags', 'Empty', 'Keyed', 'Raw',
           'valid_value', 'metric_value', 'metric_line', 'counter_data', 'sample', 'encode']

COUNTER = 'c'
GAUGE = 'g'
HISTOGRAM = 'h'
SET = 's'
TIMING = 'ms'

_RESERVED_IN_NAME = (':', '|', '\n')
_RESERVED_IN_VALUE = ('|', '\n')


class Tags(object):
    """Tag section of a line, resolved once from whatever the caller passed.

    ``Tags.parse`` maps the loosely typed ``tags`` argument onto one of three
    variants: ``Empty``, ``Keyed`` (ordered key/value pairs) or ``Raw`` (a
    verbatim string).
    """
    kind = None

    @classmethod
    def parse(cls, tags):
        if isinstance(tags, Tags):
            return tags
        if tags is None:
            return EMPTY
        if isinstance(tags, str):
            return Raw(tags) if tags else EMPTY
        if isinstance(tags, Mapping):
            return Keyed(tags.items()) if tags else EMPTY
        try:
            tags = [str(t) for t in tags]
        except TypeError:
            logger.warning('ignoring tags that are neither a mapping, a string nor a sequence', tags=tags)
            return EMPTY
        return Raw(','.join(tags)) if tags else EMPTY

    def render(self):
        raise NotImplementedError

    def suffix(self):
        text = self.render()
        if not text:
            return ''
        return '|#' + text

    def __bool__(self):
        return bool(self.render())

    def __eq__(self, other):
        return isinstance(other, Tags) and self.kind == other.kind and self.render() == other.render()

    def __repr__(self):
        return '<Tags.%s %r>' % (self.kind, self.render())


class Empty(Tags):
    kind = 'empty'

    def render(self):
        return ''


class Keyed(Tags):
    kind = 'keyed'

    def __init__(self, pairs):
        self.pairs = tuple((str(k), str(v)) for k, v in pairs)

    def render(self):
        return ','.join('%s:%s' % pair for pair in self.pairs)


class Raw(Tags):
    kind = 'raw'

    def __init__(self, text):
        self.text = text

    def render(self):
        return self.text


EMPTY = Empty()


def _valid_stat(stat):
    if not isinstance(stat, str) or not stat:
        return False
    return not any(c in stat for c in _RESERVED_IN_NAME)


def valid_value(value):
    if value is None:
        return False
    value = str(value)
    return bool(value) and not any(c in value for c in _RESERVED_IN_VALUE)


def metric_value(value, metric_type):
    """Render ``value`` with its type suffix, e.g. ``'100|ms'``."""
    return '%s|%s' % (value, metric_type)


def metric_line(stat, value, metric_type):
    return '%s:%s' % (stat, metric_value(value, metric_type))


def counter_data(stats, delta=1):
    """Every stat in ``stats`` gets the same ``<delta>|c`` value."""
    if isinstance(stats, str):
        stats = [stats]
    return dict((stat, metric_value(delta, COUNTER)) for stat in stats)


def sample(data, sample_rate=1, rand=None):
    """Keep each entry of ``data`` with probability ``sample_rate``.

    The draw is made per entry. Kept entries get ``|@<rate>`` appended when
    the rate is below 1.
    """
    rand = rand or random.random
    if sample_rate >= 1:
        return dict(data)
    sampled = {}
    for stat, value in data.items():
        if rand() < sample_rate:
            sampled[stat] = '%s|@%s' % (value, sample_rate)
    return sampled


def encode(data, tags=None, prefix=None):
    """Build the wire lines for already sampled ``data``.

    Entries whose stat or value would break the line format are dropped.
    """
    suffix = Tags.parse(tags).suffix()
    if '\n' in suffix:
        logger.warning('dropping metrics with newline in tags', tags=suffix)
        return []
    lines = []
    for stat, value in data.items():
        value = str(value)
        if not _valid_stat(stat) or '\n' in value:
            logger.warning('dropping malformed metric', stat=stat, value=value)
            continue
        if prefix:
            stat = '%s.%s' % (prefix, stat)
        lines.append('%s:%s%s' % (stat, value, suffix))
    return lines
