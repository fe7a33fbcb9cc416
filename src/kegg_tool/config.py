"""Configuration management for the KEGG tool."""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional


DEFAULT_BASE_URL = "https://rest.kegg.jp"


@dataclass(frozen=True)
class GatewayConfig:
    """Immutable connection settings handed to the gateway at construction."""
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    user_agent: str = "KEGG-Tool/1.0.0"


@dataclass
class APIConfig:
    """API configuration settings."""
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    user_agent: str = "KEGG-Tool/1.0.0"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_dir: str = ".kegg_logs"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    console: bool = True
    colors: bool = True


@dataclass
class Config:
    """Main configuration container."""
    api: APIConfig
    logging: LoggingConfig

    @classmethod
    def default(cls) -> 'Config':
        """Create default configuration."""
        return cls(
            api=APIConfig(),
            logging=LoggingConfig()
        )

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from JSON file."""
        if not path.exists():
            return cls.default()

        with open(path, 'r') as f:
            data = json.load(f)

        return cls(
            api=APIConfig(**data.get('api', {})),
            logging=LoggingConfig(**data.get('logging', {}))
        )

    def to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'api': asdict(self.api),
            'logging': asdict(self.logging)
        }

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def merge_env_vars(self) -> None:
        """Merge environment variables into configuration."""
        if os.getenv('KEGG_BASE_URL'):
            self.api.base_url = os.getenv('KEGG_BASE_URL')
        if os.getenv('KEGG_TIMEOUT'):
            self.api.timeout_seconds = float(os.getenv('KEGG_TIMEOUT'))

        if os.getenv('KEGG_LOG_LEVEL'):
            self.logging.level = os.getenv('KEGG_LOG_LEVEL')
        if os.getenv('KEGG_LOG_DIR'):
            self.logging.log_dir = os.getenv('KEGG_LOG_DIR')

    def merge_cli_args(self, **kwargs) -> None:
        """Merge CLI arguments into configuration."""
        if kwargs.get('base_url'):
            self.api.base_url = kwargs['base_url']
        if kwargs.get('timeout'):
            self.api.timeout_seconds = float(kwargs['timeout'])

        if kwargs.get('verbose'):
            self.logging.level = "DEBUG"
        if kwargs.get('no_colors'):
            self.logging.colors = False

    def gateway_config(self) -> GatewayConfig:
        """Freeze the connection settings used on the request path."""
        return GatewayConfig(
            base_url=self.api.base_url.rstrip('/'),
            timeout_seconds=self.api.timeout_seconds,
            user_agent=self.api.user_agent
        )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Check common locations
    locations = [
        Path.home() / '.kegg' / 'config.json',
        Path.home() / '.config' / 'kegg' / 'config.json',
        Path('.kegg.json'),
        Path('kegg.config.json')
    ]

    for path in locations:
        if path.exists():
            return path

    return Path.home() / '.kegg' / 'config.json'


def create_example_config(path: Optional[Path] = None) -> Path:
    """Create an example configuration file."""
    if path is None:
        path = Path('kegg.config.example.json')

    config = Config.default()
    config.api.base_url = DEFAULT_BASE_URL
    config.logging.level = "INFO"

    config.to_file(path)
    return path
