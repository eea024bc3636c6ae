"""Project configuration management for taskfoundry.

Handles reading and writing the .taskfoundry/config.yaml file in each repository.
Project values override the system-wide ~/.taskfoundry/config.yaml.
"""

import logging
from pathlib import Path

import yaml

logger = logging.getLogger("taskfoundry")


# Default configuration values
DEFAULT_CONFIG = {
    "exclude": [
        # Lock files (auto-generated dependency files)
        "*.lock",
        "package-lock.json",
        "pnpm-lock.yaml",
        "go.sum",
        # Logs and build output
        "*.log",
        "node_modules/*",
        "dist/*",
        "build/*",
        # Minified assets
        "*.min.js",
        "*.min.css",
        "*.map",
    ],
}


def get_config_dir(repo_root: Path) -> Path:
    """Get the repository config directory.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .taskfoundry/
    """
    return repo_root / ".taskfoundry"


def get_config_file(repo_root: Path) -> Path:
    """Return path to the config.yaml file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .taskfoundry/config.yaml.
    """
    return get_config_dir(repo_root) / "config.yaml"


def load_config(repo_root: Path) -> dict:
    """Load the project configuration from config.yaml.

    Unlike the system-wide config, a missing file is not created here; the
    project layer is optional.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Configuration dictionary merged over DEFAULT_CONFIG.
    """
    config_file = get_config_file(repo_root)

    if not config_file.exists():
        return {key: list(value) for key, value in DEFAULT_CONFIG.items()}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError("expected a mapping")
    except (OSError, yaml.YAMLError, ValueError) as e:
        # If config is corrupted, return defaults
        logger.warning("Ignoring unreadable project config %s: %s", config_file, e)
        return {key: list(value) for key, value in DEFAULT_CONFIG.items()}

    # Merge with defaults for any missing keys
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = list(value)
    return config


def save_config(repo_root: Path, config: dict) -> None:
    """Save the configuration to config.yaml.

    Args:
        repo_root: The root directory of the git repository.
        config: Configuration dictionary to save.
    """
    config_file = get_config_file(repo_root)

    # Ensure directory exists
    config_file.parent.mkdir(exist_ok=True)

    with open(config_file, "w") as f:
        yaml.dump(
            config,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def get_exclude_patterns(repo_root: Path) -> list[str]:
    """Get the glob patterns of files left out of the diff.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        List of file patterns to exclude.
    """
    config = load_config(repo_root)
    return config.get("exclude") or []


def get_api_keys(repo_root: Path) -> dict[str, str]:
    """Get project-level API keys, keyed by provider name.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Mapping such as {"groq": "gsk_..."}; empty if none are set.
    """
    config = load_config(repo_root)
    api_keys = config.get("api_keys") or {}
    if not isinstance(api_keys, dict):
        return {}
    return {str(name).lower(): str(key) for name, key in api_keys.items() if key}
