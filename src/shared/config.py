import json
from pathlib import Path
from typing import Dict, Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.const import (
    CONFIG_FILE, DEFAULT_LOG_LEVEL, DEFAULT_STRICT_PAIRING, DEFAULT_WORKERS,
    ENV_PREFIX, LIBRARY_LOG_LEVELS
)
from src.loadcompare.models import MarginConfig


class CompareSettings(BaseSettings):
    """Global configuration settings for loadcompare."""

    log_level: str = DEFAULT_LOG_LEVEL
    workers: int = DEFAULT_WORKERS
    strict_pairing: bool = DEFAULT_STRICT_PAIRING
    margins: MarginConfig = MarginConfig()
    library_log_levels: Dict[str, str] = dict(LIBRARY_LOG_LEVELS)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter='__',
    )

    @classmethod
    def load_config_from_json(cls) -> Dict[str, Any]:
        """Load configuration from loadcompare.json file."""
        config_path = Path(CONFIG_FILE)
        if config_path.exists():
            with open(config_path, 'r') as f:
                return json.load(f)
        return {}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        Customise the sources for settings.

        Order of precedence (highest to lowest):
        1. Environment variables
        2. Init settings (kwargs passed to constructor)
        3. JSON config file
        4. Default values
        """
        def json_source():
            return cls.load_config_from_json()

        return (
            env_settings,
            init_settings,
            json_source,
        )
