import time
import sys
import traceback
import os
import platform
import json
import inspect

_start_time = time.time()


class LoggerLevel:
    CRITICAL = 50
    ERROR = 40
    WARNING = 30
    INFO = 20
    DEBUG = 10
    NOTSET = 0
    name_level_map = {
        'CRITICAL': CRITICAL,
        'FATAL': CRITICAL,
        'ERROR': ERROR,
        'WARN': WARNING,
        'WARNING': WARNING,
        'INFO': INFO,
        'DEBUG': DEBUG,
        'NOTSET': NOTSET,
    }

    @classmethod
    def get_levelno(cls, name, default=0):
        return cls.name_level_map.get(name.strip().upper(), default)


def dump_obj(obj, depth=0, max_depth=1):
    """Turn ``obj`` into something ``json.dumps`` accepts."""
    if obj is None:
        return None
    elif isinstance(obj, bytes):
        return obj.decode('utf-8', 'replace')
    elif isinstance(obj, (bool, int, float, str)):
        return obj
    elif isinstance(obj, (tuple, list)):
        return [dump_obj(x, depth=depth, max_depth=max_depth) for x in obj]
    elif isinstance(obj, dict):
        return dict((str(k), dump_obj(v, depth=depth, max_depth=max_depth)) for k, v in obj.items())
    elif isinstance(obj, BaseException):
        return '<{}>: {}'.format(type(obj).__name__, obj)

    if hasattr(obj, 'to_dict'):
        return obj.to_dict()
    if depth >= max_depth or not hasattr(obj, '__dict__'):
        return "<{} instance at {}>".format(type(obj).__name__, hex(id(obj)))
    return dict((k, dump_obj(v, depth=depth + 1, max_depth=max_depth)) for k, v in vars(obj).items())


class LogRecord(object):
    def __init__(self, name, level, msg, args, exc_info, **kwargs):
        ct = time.time()
        self.name = name
        self.msg = msg
        self.args = args
        self.levelname = level
        self.levelno = LoggerLevel.get_levelno(level, 60)
        self.exc_info = exc_info
        self.hostname = platform.node()
        self.process = os.getpid()
        self.created = ct
        self.msecs_since_start = (ct - _start_time) * 1000
        self.debuginfo = kwargs.pop('debuginfo', '')
        self.kwargs = kwargs

    def __repr__(self):
        return '<LogRecord: %s, %s, "%s">' % (self.name, self.levelname, self.msg)

    def get_message(self):
        msg = str(self.msg)
        if self.args:
            msg = msg % self.args
        if self.exc_info:
            if isinstance(self.exc_info, BaseException):
                exc_str = '<{}>: {}'.format(type(self.exc_info).__name__, str(self.exc_info))
            elif isinstance(self.exc_info, (tuple, list)):
                exc_str = ''.join(traceback.format_exception(*self.exc_info))
            else:
                exc_str = str(self.exc_info)
            msg = '{}\n{}\n'.format(msg, exc_str)
        return msg

    def to_dict(self):
        return dict(
            name=self.name,
            level=self.levelname,
            created=self.created,
            hostname=self.hostname,
            process=self.process,
            debuginfo=self.debuginfo,
            message=self.get_message(),
            data=dict((k, dump_obj(v)) for k, v in self.kwargs.items())
        )


class BaseHandler(object):
    def handle_error(self, record):
        if sys.stderr:
            t, v, tb = sys.exc_info()
            try:
                sys.stderr.write('--- Logging error ---\n')
                traceback.print_exception(t, v, tb, None, sys.stderr)
                sys.stderr.write('Message: %r\nArguments: %s\n' % (record.msg, record.args))
            except OSError:  # pragma: no cover
                pass
            finally:
                del t, v, tb


class StdoutHandler(BaseHandler):
    terminator = '\n'

    def __init__(self, stream=None, format=None, level="DEBUG", **kwargs):
        self.stream = stream or sys.stdout
        self.format_str = format or "[{created}] [{hostname}.{process}] [{level}] [{debuginfo}] [{message}]"
        self.level = level
        self.levelno = LoggerLevel.get_levelno(self.level, 0)

    def flush(self):
        if self.stream and hasattr(self.stream, "flush"):
            self.stream.flush()

    def emit(self, record):
        try:
            self.stream.write(self.make_message(record) + self.terminator)
            self.flush()
        except Exception:
            self.handle_error(record)

    def make_message(self, record):
        data = record.to_dict()
        data['created'] = time.strftime("%Y-%m-%d %H:%M:%S %z", time.localtime(data['created']))
        extra_data = data.pop('data')
        msg = self.format_str.format(**data)
        extra = ' '.join(map(lambda x: "[{} = {}]".format(x[0], json.dumps(x[1])), extra_data.items()))
        if extra:
            msg = ' '.join([msg, extra])
        return msg

    def __repr__(self):
        name = str(getattr(self.stream, 'name', ''))
        return '<%s %s(%s)>' % (self.__class__.__name__, name, self.level)


class Logger(object):
    handler_class_map = {
        'stdout': StdoutHandler,
    }

    def __init__(self, name=""):
        self.name = name
        self.handlers = []
        self.dev_mode = True

    def add(self, handler, level="DEBUG", log_format=None, **kwargs):
        h_cls = self.handler_class_map.get(handler)
        if not h_cls:
            raise Exception('no handler class for {}'.format(handler))
        self.handlers.append(h_cls(format=log_format, level=level, **kwargs))

    def clear(self):
        self.handlers = []

    def _filter_handlers(self, level):
        levelno = LoggerLevel.get_levelno(level)
        return list(filter(lambda x: levelno >= x.levelno, self.handlers))

    def get_debuginfo(self):
        for frame in inspect.getouterframes(inspect.currentframe(), 1):
            if not frame.filename.endswith(os.path.join('pydogstatsd', 'log.py')):
                return '{}:{}'.format(frame.filename, frame.lineno)
        return 'no-frameinfo'

    def log(self, level, message, args, kwargs):
        handlers = self._filter_handlers(level)
        if not handlers:
            return
        exc_info = kwargs.pop('exc_info', None)
        if exc_info is True:
            exc_info = sys.exc_info() if sys.exc_info()[0] else None
        debuginfo = self.get_debuginfo() if level == "DEBUG" else ":0"
        record = LogRecord(self.name, level, message, args, exc_info, debuginfo=debuginfo, **kwargs)
        for handler in handlers:
            handler.emit(record)

    def debug(self, message, *args, **kwargs):
        if self.dev_mode:
            self.log('DEBUG', message, args, kwargs)

    def info(self, message, *args, **kwargs):
        self.log('INFO', message, args, kwargs)

    def warning(self, message, *args, **kwargs):
        self.log('WARNING', message, args, kwargs)

    def error(self, message, *args, **kwargs):
        self.log('ERROR', message, args, kwargs)

    def critical(self, message, *args, **kwargs):
        self.log('CRITICAL', message, args, kwargs)

    def exception(self, message, *args, exc_info=True, **kwargs):
        self.error(message, *args, exc_info=exc_info, **kwargs)


logger = Logger("pydogstatsd")
