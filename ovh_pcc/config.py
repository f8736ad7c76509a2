"""
Settings for the vCenter connection and chef bootstrap

Values are merged from defaults, a YAML file, OVH_PCC_* environment
variables and command line flags, later sources winning.
"""

import os
import yaml
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Dict, Any, Mapping
from .bootstrap.distros import DEFAULT_DISTRO
from .exceptions import ConfigError


ENV_PREFIX = 'OVH_PCC_'
CONFIG_ENV_VAR = 'OVH_PCC_CONFIG'
DEFAULT_CONFIG_PATH = Path.home() / '.ovh-pcc.yml'

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass
class PccConfig:
    vsphere_host: Optional[str] = None
    vsphere_user: Optional[str] = None
    vsphere_pass: Optional[str] = None
    vsphere_port: int = 443
    vsphere_dc: Optional[str] = None
    vsphere_insecure: bool = False
    distro: str = DEFAULT_DISTRO
    bootstrap_version: Optional[str] = None
    chef_server_url: Optional[str] = None
    validation_client_name: str = 'chef-validator'
    validation_key: Optional[str] = None

    def validate(self) -> None:
        """Ensure the settings needed to reach vCenter are present"""
        missing = [name for name in ('vsphere_host', 'vsphere_user') if not getattr(self, name)]
        if missing:
            raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _coerce(name: str, value: Any) -> Any:
    if name == 'vsphere_port':
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid vsphere_port '{value}'")
    if name == 'vsphere_insecure':
        return to_bool(value)
    return value


def read_config_file(path: Path) -> Dict[str, Any]:
    """Load settings from YAML; a ``knife:`` section is read like the top level"""
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    settings = dict(data)
    knife = settings.pop('knife', None)
    if isinstance(knife, dict):
        settings.update(knife)
    return settings


def resolve_config_path(path: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    if path:
        return Path(path).expanduser()
    if environ.get(CONFIG_ENV_VAR):
        return Path(environ[CONFIG_ENV_VAR]).expanduser()
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Optional[str] = None,
                overrides: Optional[Mapping[str, Any]] = None,
                environ: Optional[Mapping[str, str]] = None) -> PccConfig:
    """Merge all setting sources into a PccConfig

    ``overrides`` holds command line values; None entries are ignored so
    unset flags never mask file or environment settings.
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(PccConfig)}
    merged: Dict[str, Any] = {}

    config_path = resolve_config_path(path, environ)
    if config_path is not None:
        # an empty YAML value means unset
        merged.update({k: v for k, v in read_config_file(config_path).items()
                       if k in known and v is not None})

    for name in known:
        env_value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if env_value is not None:
            merged[name] = env_value

    for name, value in (overrides or {}).items():
        if name in known and value is not None:
            merged[name] = value

    return PccConfig(**{name: _coerce(name, value) for name, value in merged.items()})
