import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from .url_resolution.models import ResolverConfig, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "twitlinks" / "config.json"


class Config:
    """Settings for a twitlinks run.

    Defaults can be overridden from a JSON file (``~/.config/twitlinks/config.json``
    unless another path is given) and then from the command line. It covers:
    - Input reading
    - Output format and destination
    - Redirect resolution
    - Logging
    """

    def __init__(self):
        # Input
        self.encoding = 'UTF-8'

        # Output
        self.output: Optional[Path] = None  # Combine all inputs into one file
        self.output_format = 'xlsx'
        self.truncate = False  # Overwrite instead of appending to existing output

        # Redirect resolution
        self.max_redirects = 5
        self.connect_timeout = 5.0  # Seconds
        self.read_timeout = 10.0  # Seconds
        self.retries = 2
        self.verify_tls = True
        self.user_agent = DEFAULT_USER_AGENT
        self.workers = 8  # Links resolved in parallel
        self.cache_file: Optional[Path] = None

        # Display and logging
        self.verbose = False
        self.progress = False
        self.log_file: Optional[Path] = Path("twitlinks.log")

    def resolver_config(self) -> ResolverConfig:
        return ResolverConfig(
            max_redirects=self.max_redirects,
            verify_tls=self.verify_tls,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            retries=self.retries,
            user_agent=self.user_agent,
        )

    def update(self, overrides: Dict[str, Any]) -> None:
        """Apply known settings from a mapping, ignoring None values."""
        for key, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self, key):
                logger.warning(f"Ignoring unknown setting: {key}")
                continue
            if key in ('output', 'cache_file', 'log_file'):
                value = Path(value)
            setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            'encoding': self.encoding,
            'output': str(self.output) if self.output else None,
            'output_format': self.output_format,
            'truncate': self.truncate,
            'max_redirects': self.max_redirects,
            'connect_timeout': self.connect_timeout,
            'read_timeout': self.read_timeout,
            'retries': self.retries,
            'verify_tls': self.verify_tls,
            'user_agent': self.user_agent,
            'workers': self.workers,
            'cache_file': str(self.cache_file) if self.cache_file else None,
            'verbose': self.verbose,
            'progress': self.progress,
            'log_file': str(self.log_file) if self.log_file else None,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create Config instance from dictionary."""
        config = cls()
        config.update(config_dict)
        return config

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'Config':
        """Load settings from a JSON file, keeping defaults if it is missing or invalid."""
        path = Path(path) if path else DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config in {path}: expected a JSON object")
            return cls()
        return cls.from_dict(data)

    def save(self, path: Optional[Path] = None) -> None:
        path = Path(path) if path else DEFAULT_CONFIG_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
