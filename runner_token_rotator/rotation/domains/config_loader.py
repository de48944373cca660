"""Configuration loader for runner-token-rotator."""
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_ACCEPT_HEADER = "application/vnd.github.v3+json"

# Environment variable names
PROJECT_ID_ENV = "project_id"
GCP_PROJECT_ENV = "GCP_PROJECT"
CONFIG_PATH_ENV = "RUNNER_ROTATOR_CONFIG"


def default_config_path() -> Path:
    return Path.home() / ".config" / "runner-token-rotator" / "config.yml"


@dataclass
class RotatorConfig:
    """Settings for one rotation process, resolved once at startup."""
    project_id: str
    api_base_url: str = DEFAULT_API_BASE_URL
    accept_header: str = DEFAULT_ACCEPT_HEADER
    request_timeout: Optional[float] = None
    require_success_status: bool = False


def get_config_path(env: Mapping[str, str]) -> Optional[str]:
    """
    Locate the optional YAML config file.

    Priority order:
    1. RUNNER_ROTATOR_CONFIG environment variable (must exist if set)
    2. Default location: ~/.config/runner-token-rotator/config.yml

    Returns:
        Path to the config file, or None if no file is configured

    Raises:
        ConfigError: If RUNNER_ROTATOR_CONFIG points at a missing file
    """
    env_path = env.get(CONFIG_PATH_ENV)
    if env_path:
        config_path = Path(env_path)
        if not config_path.is_file():
            raise ConfigError(
                f"Config file from {CONFIG_PATH_ENV} not found: {config_path}"
            )
        logger.info(f"Using config from {CONFIG_PATH_ENV}: {config_path}")
        return str(config_path)

    default_config = default_config_path()
    if default_config.is_file():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    return None


def _read_yaml(config_path: str) -> Dict[str, Any]:
    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")
    return data


def load_config(env: Optional[Mapping[str, str]] = None) -> RotatorConfig:
    """
    Build the rotator configuration from the environment and optional YAML file.

    The project id comes from the ``project_id`` environment variable, then
    ``GCP_PROJECT``, then ``gcp.project_id`` in the YAML file. Everything
    else is read from the ``github`` section of the YAML file.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        RotatorConfig

    Raises:
        ConfigError: If no project id is found or the YAML file is invalid
    """
    if env is None:
        env = os.environ

    config_path = get_config_path(env)
    file_config = _read_yaml(config_path) if config_path else {}

    gcp = file_config.get('gcp') or {}
    github = file_config.get('github') or {}
    if not isinstance(gcp, dict) or not isinstance(github, dict):
        raise ConfigError(f"'gcp' and 'github' sections in {config_path} must be mappings")

    project_id = env.get(PROJECT_ID_ENV) or env.get(GCP_PROJECT_ENV) or gcp.get('project_id')
    if not project_id:
        raise ConfigError(
            "Project ID not found. Set the project_id environment variable, "
            f"{GCP_PROJECT_ENV}, or gcp.project_id in the config file"
        )

    timeout = github.get('request_timeout')
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"github.request_timeout must be a number, got {timeout!r}") from e

    config = RotatorConfig(
        project_id=str(project_id),
        api_base_url=str(github.get('api_base_url', DEFAULT_API_BASE_URL)).rstrip('/'),
        accept_header=str(github.get('accept', DEFAULT_ACCEPT_HEADER)),
        request_timeout=timeout,
        require_success_status=bool(github.get('require_success_status', False)),
    )

    logger.debug(f"Using project ID: {config.project_id}")
    logger.debug(f"Using GitHub API: {config.api_base_url}")
    return config
