"""Global configuration management for taskfoundry.

Handles user-level configuration stored in ~/.taskfoundry/:
- config.yaml: Engine, model, and generation preferences
- credentials: API keys for LLM providers
- usage.json: Free-tier usage counters (see taskfoundry.usage)
"""

import os
import stat
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".taskfoundry"

# Keys accepted in config.yaml
CONFIG_KEYS = (
    "engine",
    "model",
    "temperature",
    "max_tokens",
    "output",
    "detailed",
    "fallback",
    "local_endpoint",
    "timeout",
)

DEFAULT_GLOBAL_CONFIG = {
    "engine": "auto",
    "model": None,
    "temperature": None,
    "max_tokens": None,
    "output": "markdown",
    "detailed": False,
    "fallback": False,
}


def get_global_config_dir() -> Path:
    """Get the global taskfoundry configuration directory.

    Returns:
        Path to ~/.taskfoundry/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.taskfoundry/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file.

    Returns:
        Path to ~/.taskfoundry/config.yaml
    """
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    """Get path to credentials file.

    Returns:
        Path to ~/.taskfoundry/credentials
    """
    return get_global_config_dir() / "credentials"


def get_usage_file_path() -> Path:
    """Get path to the free-tier usage file.

    Returns:
        Path to ~/.taskfoundry/usage.json
    """
    return get_global_config_dir() / "usage.json"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.taskfoundry/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Invalid config in {config_file}: expected a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.taskfoundry/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")


def set_config_value(key: str, value: Any) -> None:
    """Set a single preference in config.yaml.

    Args:
        key: One of CONFIG_KEYS.
        value: The value to store.

    Raises:
        GlobalConfigError: If the key is unknown.
    """
    if key not in CONFIG_KEYS:
        raise GlobalConfigError(
            f"Unknown config key: {key}. Must be one of: {', '.join(CONFIG_KEYS)}"
        )
    config = load_global_config()
    config[key] = value
    save_global_config(config)


def reset_global_config() -> None:
    """Overwrite config.yaml with the defaults. Credentials are kept."""
    save_global_config(dict(DEFAULT_GLOBAL_CONFIG))


def _read_credentials_file(credentials_file: Path) -> Dict[str, str]:
    credentials = {}
    with open(credentials_file, "r") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse KEY=value format
            if "=" in line:
                key, value = line.split("=", 1)
                credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.taskfoundry/credentials.

    Returns:
        Dictionary mapping env var names (e.g. GROQ_API_KEY) to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        return _read_credentials_file(credentials_file)
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    Args:
        provider_key: Environment variable name (e.g., "GROQ_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing_creds = load_credentials()
    existing_creds[provider_key] = api_key

    try:
        with open(credentials_file, "w") as f:
            f.write("# taskfoundry API credentials\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")

            for key, value in existing_creds.items():
                f.write(f"{key}={value}\n")

        # Owner read/write only
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)

    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from credentials file.

    Args:
        provider_key: Environment variable name (e.g., "GROQ_API_KEY")

    Returns:
        The API key if found, None otherwise.
    """
    return load_credentials().get(provider_key)


def is_configured() -> bool:
    """Check if taskfoundry has a system-wide config.yaml."""
    return get_config_file_path().exists()
