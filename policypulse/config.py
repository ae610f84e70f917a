# policypulse/config.py
import copy
import logging
import os
from typing import Any, Dict

import yaml

CONFIG_FILENAME = "policypulse_config.yaml"

# -------- Defaults (non-secret) --------
_DEFAULT: Dict[str, Any] = {
    "backend": {
        "driver": "json",  # json | memory | http
        "path": "policypulse_store.json",  # json driver
        "api_url": "http://127.0.0.1:8545",  # http driver
        "timeout_sec": 10.0,
    },
    "encoder": {"kind": "placeholder"},  # placeholder | aesgcm
    "status": {"success_clear_sec": 2.0, "error_clear_sec": 3.0},
    "server": {"host": "127.0.0.1", "port": 8000},
    "logging": {"level": "INFO"},
}

# -------- ENV overrides (secrets never live in YAML) --------
_ENV_MAP = {
    ("backend", "driver"): ("POLICYPULSE_BACKEND", str),
    ("backend", "path"): ("POLICYPULSE_DATA_PATH", str),
    ("backend", "api_url"): ("POLICYPULSE_API_URL", str),
    ("backend", "timeout_sec"): ("POLICYPULSE_TIMEOUT_SEC", float),
    ("logging", "level"): ("POLICYPULSE_LOG_LEVEL", str),
    # AES-GCM key (url-safe base64); only via ENV
    ("encoder", "seal_key"): ("POLICYPULSE_SEAL_KEY", str),
}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for (section, key), (env_name, cast) in _ENV_MAP.items():
        val = os.getenv(env_name)
        if val is not None:
            try:
                casted = cast(val)
            except ValueError:
                casted = val
            cfg.setdefault(section, {})
            cfg[section][key] = casted
    return cfg


def load_config(repo_root: str = ".") -> Dict[str, Any]:
    """
    Loads repo_root/policypulse_config.yaml on top of the defaults.
    Returns defaults if the file doesn't exist or can't be parsed, then
    applies ENV overrides.
    """
    path = os.path.join(repo_root, CONFIG_FILENAME)
    cfg = copy.deepcopy(_DEFAULT)

    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if isinstance(data, dict):
                cfg = _deep_merge(cfg, data)
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning("Ignoring unreadable %s: %s", path, e)

    return _apply_env_overrides(cfg)


def configure_logging(cfg: Dict[str, Any]) -> None:
    level = str(cfg.get("logging", {}).get("level", "INFO")).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)


# -------- Small helpers used by the app --------
def get_bind_host(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("server", {}).get("host", "127.0.0.1"))


def get_bind_port(cfg: Dict[str, Any]) -> int:
    return int(cfg.get("server", {}).get("port", 8000))


def get_success_clear_sec(cfg: Dict[str, Any]) -> float:
    return float(cfg.get("status", {}).get("success_clear_sec", 2.0))


def get_error_clear_sec(cfg: Dict[str, Any]) -> float:
    return float(cfg.get("status", {}).get("error_clear_sec", 3.0))
