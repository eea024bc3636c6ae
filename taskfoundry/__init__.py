"""Turn git diffs into task descriptions and conventional commit messages."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("taskfoundry")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
