import yaml
from pydogstatsd.config import Settings


def load_yaml(content):
    return yaml.safe_load(content)


def load():
    """Let ``Settings`` read ``settings.yaml`` / ``settings.yml`` files."""
    Settings.register_loader('.yaml', load_yaml)
    Settings.register_loader('.yml', load_yaml)
