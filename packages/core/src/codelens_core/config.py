from pathlib import Path
from typing import Optional

import yaml

from codelens_core.prompt import DEFAULT_FOCUS

DEFAULT_CONFIG: dict = {
    "focus": DEFAULT_FOCUS,
    "base_url": None,  # None = the provider SDK's default endpoint
    "request_timeout": None,  # seconds; None = whatever the transport enforces
}


def load_config(config_path: str = ".codelens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codelens.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config
