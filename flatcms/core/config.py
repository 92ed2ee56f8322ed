"""
Configuration loading.

Precedence, lowest first: built-in defaults, ``config.json`` (or the file
named by ``FLATCMS_CONFIG``), ``FLATCMS_*`` environment variables, and
finally the overrides handed to ``create_app()``.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import os
import sys

logger = logging.getLogger(__name__)


def find_project_root(package_dir: Optional[Path] = None) -> Path:
    """
    Base directory for the default file locations. A source checkout uses
    its own root; an installed package falls back to the working directory.
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    checkout = Path(package_dir or Path(__file__).resolve().parent.parent).parent
    if (checkout / 'pyproject.toml').exists():
        return checkout
    return Path.cwd()


PROJECT_ROOT = find_project_root()
CONFIG_FILE = PROJECT_ROOT / 'config.json'

MAX_UPLOAD_MB = 20

# config key -> (environment variable, converter)
ENV_OVERRIDES = {
    'DATA_DIR': ('FLATCMS_DATA_DIR', str),
    'CREDENTIALS_FILE': ('FLATCMS_CREDENTIALS_FILE', str),
    'LOG_DIR': ('FLATCMS_LOG_DIR', str),
    'SECRET_KEY': ('FLATCMS_SECRET_KEY', str),
    'MAX_CONTENT_LENGTH': ('FLATCMS_MAX_UPLOAD_MB', lambda mb: int(mb) * 1024 * 1024),
}


def default_config() -> Dict[str, Any]:
    return {
        'DATA_DIR': str(PROJECT_ROOT / 'data'),
        'CREDENTIALS_FILE': str(PROJECT_ROOT / 'users.json'),
        'LOG_DIR': str(PROJECT_ROOT / 'logs'),
        'SECRET_KEY': os.urandom(24),
        'MAX_CONTENT_LENGTH': MAX_UPLOAD_MB * 1024 * 1024,
        'DEBUG': os.environ.get('FLASK_ENV') == 'development',
    }


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read the JSON config file. A missing or broken file yields {}."""
    path = Path(path or os.environ.get('FLATCMS_CONFIG') or CONFIG_FILE)
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Ignoring config {path}: expected a JSON object")
        return {}
    return {key.upper(): value for key, value in data.items()}


def load_config(overrides: Optional[Dict[str, Any]] = None, config_path: Optional[Path] = None) -> Dict[str, Any]:
    config = default_config()
    config.update(load_config_file(config_path))

    for key, (env_name, convert) in ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw:
            try:
                config[key] = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid {env_name}={raw!r}")

    if overrides:
        config.update(overrides)
    return config
