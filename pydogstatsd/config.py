from functools import partial
import os
import json

import toml
from box import Box

__all__ = ['Settings', 'client_from_settings', 'DEFAULTS']

DEFAULTS = {
    'host': '127.0.0.1',
    'port': 8125,
    'prefix': None,
    'endpoint': 'https://app.datadoghq.com',
    'batched': False,
    'max': 50,
}


class Missing:
    """
    Sentinel value object/singleton used to differentiate between ambiguous
    situations where `None` is a valid value.
    """

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other) -> bool:
        return isinstance(other, self.__class__)

    def __repr__(self) -> str:
        return "<Missing>"


missing = Missing()


class Settings(object):
    """Settings read from ``settings.*`` and ``.secrets.*`` files.

    Files are looked up in ``<root>/config`` first, then in ``<root>``. For
    each prefix the ``.local`` variant is loaded after the plain one and its
    top level keys win.
    """
    _ext_list = ['.toml', '.json']
    _ext_loaders = {}
    __slots__ = ['_store', '_secrets', 'root_path', '_config_files', '_secrets_files']

    def __init__(self, root_path=None):
        self._store = Box({}, box_it_up=True, frozen_box=True)
        self._secrets = Box({}, box_it_up=True, frozen_box=True)
        self._config_files = ()
        self._secrets_files = ()
        self.root_path = root_path or os.getcwd()
        self.execute_loaders()

    def __call__(self, *args, **kwargs):
        return self.get(*args, **kwargs)

    def __getattr__(self, name):
        value = self.get(name)
        if value is None:
            raise KeyError("{0} does not exists".format(name))
        return value

    def __contains__(self, item):
        return item in self.store

    def __getitem__(self, item):
        value = self.get(item)
        if value is None:
            raise KeyError("{0} does not exists".format(item))
        return value

    @property
    def store(self):
        return self._store

    @property
    def secrets(self):
        return self._secrets

    @property
    def config_files(self):
        return self._config_files

    def keys(self):
        return self.store.keys()

    @classmethod
    def register_loader(cls, ext, loader_func):
        if not callable(loader_func):
            raise Exception('loader_func must be callable, and accept text content as parameter.')
        if not ext.startswith('.'):
            raise Exception('ext must be start with ".", for example, using ".json" instead of "json"')
        cls._ext_loaders[ext] = loader_func
        if ext not in cls._ext_list:
            cls._ext_list.append(ext)

    def as_dict(self):
        return self.store.to_dict()

    to_dict = as_dict

    def get(self, key, default=None):
        return self.store.get(key, default)

    def exists(self, key):
        return self.get(key, default=missing) is not missing

    def reload(self):
        self.execute_loaders()

    def _file_loader(self, ext, fpath):
        if ext == '.toml':
            return partial(self.load_toml, fpath)
        elif ext == '.json':
            return partial(self.load_json, fpath)
        elif ext in self._ext_loaders:
            return partial(self.load_with_extloader, fpath, ext)
        raise Exception(f'No available loader for {ext} file')

    def _find_files(self, root, prefixes):
        found = []
        for prefix in prefixes:
            for ext in self._ext_list:
                fpath = os.path.join(root, prefix + ext)
                if os.path.isfile(fpath):
                    found.append((self._file_loader(ext, fpath), fpath))
        return found

    def _load(self, root, prefixes):
        config_dir = os.path.join(root, 'config')
        files = []
        if os.path.isdir(config_dir):
            files = self._find_files(config_dir, prefixes)
        if not files:
            files = self._find_files(root, prefixes)
        data = {}
        for loader, _ in files:
            data.update(loader() or {})
        return Box(data, box_it_up=True, frozen_box=True), tuple(f for _, f in files)

    def execute_loaders(self):
        self._store, self._config_files = self._load(self.root_path, ['settings', 'settings.local'])
        self._secrets, self._secrets_files = self._load(self.root_path, ['.secrets', '.secrets.local'])

    def load_toml(self, path):
        return toml.load(path)

    def load_with_extloader(self, path, ext):
        with open(path, 'rb') as f:
            return self._ext_loaders[ext](f.read())

    def load_json(self, path):
        with open(path, 'rb') as f:
            return json.loads(f.read())


def client_from_settings(settings, section='statsd'):
    """Build a client from the ``[statsd]`` section and the secrets.

    Missing keys fall back to ``DEFAULTS``; ``api_key`` and
    ``application_key`` are read from the secrets only.
    """
    from pydogstatsd.client import DogStatsd, batched

    options = dict(DEFAULTS)
    options.update(settings.get(section, None) or {})
    secrets = settings.secrets.get(section, None) or settings.secrets
    kwargs = dict(
        api_key=secrets.get('api_key'),
        application_key=secrets.get('application_key'),
        endpoint=options['endpoint'],
        prefix=options['prefix'],
    )
    if options['batched']:
        return batched(options['host'], int(options['port']), max=int(options['max']), **kwargs)
    return DogStatsd(options['host'], int(options['port']), **kwargs)
