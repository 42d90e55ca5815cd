from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = '/app/config.yaml'
DEFAULT_SESSION_FILE_PATH = '/app/data/session.json'
DEFAULT_RPC_URL = 'http://localhost:9091/transmission/rpc'
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_MAX_CONCURRENT_REQUESTS = 0


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ['true', '1', 'yes']


# Helper function to get environment variables with type casting
def get_env_var(key: str, default: Any = None, cast_to=str) -> Any:
    value = os.environ.get(key, default)
    if value is not None:
        return cast_to(value)
    return default


def load_yaml(path: str) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as e:
        logging.warning(f'Could not read config file {path}: {e}')
        return {}


class ConfigAccessor:
    def __init__(self, cfg: Dict[str, Any]) -> None:
        self.cfg = cfg if isinstance(cfg, dict) else {}

    def _section(self, name: str) -> Dict[str, Any]:
        sec = self.cfg.get(name)
        return sec if isinstance(sec, dict) else {}

    # Endpoint: env > YAML > default
    def endpoint(self) -> Dict[str, Optional[str]]:
        tr = self._section('transmission')
        return {
            'url': os.environ.get('TRANSMISSION_URL') or tr.get('url') or DEFAULT_RPC_URL,
            'username': os.environ.get('TRANSMISSION_USERNAME') or tr.get('username') or None,
            'password': os.environ.get('TRANSMISSION_PASSWORD') or tr.get('password') or None,
            'session_id': os.environ.get('TRANSMISSION_SESSION_ID') or tr.get('session_id') or None,
        }

    # General settings accessor
    def general(self, key: str, default: Any = None) -> Any:
        return self._section('general').get(key, default)

    def debug_logging(self) -> bool:
        env = os.environ.get('DEBUG_LOGGING')
        if env is not None:
            return _as_bool(env)
        return _as_bool(self.general('debug_logging', False))

    def structured_logs(self) -> bool:
        env = os.environ.get('STRUCTURED_LOGS')
        if env is not None:
            return _as_bool(env)
        return _as_bool(self.general('structured_logs', True))

    def request_timeout(self) -> float:
        return float(get_env_var('REQUEST_TIMEOUT', self.general('request_timeout', DEFAULT_REQUEST_TIMEOUT), cast_to=float))

    def max_concurrent_requests(self) -> int:
        return int(get_env_var('MAX_CONCURRENT_REQUESTS', self.general('max_concurrent_requests', DEFAULT_MAX_CONCURRENT_REQUESTS), cast_to=int))

    def session_file_path(self) -> str:
        return str(get_env_var('SESSION_FILE_PATH', self.general('session_file_path', DEFAULT_SESSION_FILE_PATH)))


def sanitize_config(cfg: Dict[str, Any], debug_logging: bool = False) -> Dict[str, Any]:
    if not isinstance(cfg, dict):
        return {}
    out = dict(cfg)

    def _nz(v, cast, default):
        try:
            return cast(v)
        except (TypeError, ValueError):
            return default

    gen = out.get('general') if isinstance(out.get('general'), dict) else {}
    if gen:
        gen = dict(gen)
        if 'request_timeout' in gen:
            gen['request_timeout'] = max(0, _nz(gen.get('request_timeout'), float, DEFAULT_REQUEST_TIMEOUT))
        if 'max_concurrent_requests' in gen:
            gen['max_concurrent_requests'] = max(0, _nz(gen.get('max_concurrent_requests'), int, DEFAULT_MAX_CONCURRENT_REQUESTS))
        for flag in ('debug_logging', 'structured_logs'):
            if flag in gen:
                gen[flag] = _as_bool(gen.get(flag))
        out['general'] = gen

    tr = out.get('transmission')
    if tr is not None and not isinstance(tr, dict):
        if debug_logging:
            logging.warning(f'Ignoring invalid transmission section: {tr!r}')
        out.pop('transmission', None)
    elif isinstance(tr, dict):
        tr = dict(tr)
        for key in ('url', 'username', 'password', 'session_id'):
            if tr.get(key) is not None:
                tr[key] = str(tr[key])
        if tr.get('url'):
            tr['url'] = tr['url'].strip()
        out['transmission'] = tr
    return out


def validate_config(cfg: Dict[str, Any], debug_logging: bool = False) -> None:
    problems = []
    acc = ConfigAccessor(cfg)
    ep = acc.endpoint()
    url = ep.get('url') or ''
    if not url.startswith(('http://', 'https://')):
        problems.append(f"Transmission url '{url}' is not an http(s) URL; requests will fail.")
    if ep.get('password') and not ep.get('username'):
        problems.append('Transmission password set without username; authentication will not be sent.')
    try:
        if acc.request_timeout() == 0:
            problems.append('request_timeout is 0; requests will time out immediately.')
    except (TypeError, ValueError):
        problems.append('request_timeout is not a number; the default will be used.')
    for p in problems:
        logging.warning(p)
