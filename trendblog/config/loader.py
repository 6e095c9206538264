"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "trendblog" / "config.yaml"


class Config:
    """Configuration manager."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        model: Optional[ConfigModel] = None,
    ) -> None:
        """
        Initialize config manager.

        Args:
            config_path: YAML file to load lazily (default: $TRENDBLOG_CONFIG
                or ~/.config/trendblog/config.yaml)
            model: Already-built configuration, skips file loading
        """
        if config_path is None:
            env_path = os.environ.get("TRENDBLOG_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        self.config_path = config_path
        self._config: Optional[ConfigModel] = model

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        # Handle password from environment if specified
        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config

    def get_llm_config(self) -> Dict[str, Any]:
        """Get LLM configuration dict."""
        llm_config = self.config.llm.model_dump()

        if llm_config.get("api_key_env"):
            api_key = os.environ.get(llm_config["api_key_env"])
            if api_key:
                llm_config["api_key"] = api_key

        return llm_config

    def get_image_config(self) -> Dict[str, Any]:
        """Get image generation configuration dict."""
        image_config = self.config.image.model_dump()

        if image_config.get("api_key_env"):
            api_key = os.environ.get(image_config["api_key_env"])
            if api_key:
                image_config["api_key"] = api_key

        return image_config

    def get_reddit_credentials(self) -> Optional[Dict[str, str]]:
        """
        Resolve Reddit password-grant credentials from the environment.

        Returns:
            Credentials dict, or None when public access is configured or
            any credential is missing
        """
        reddit = self.config.reddit
        if reddit.auth_mode != "password":
            return None

        credentials = {
            "client_id": os.environ.get(reddit.client_id_env, ""),
            "client_secret": os.environ.get(reddit.client_secret_env, ""),
            "username": os.environ.get(reddit.username_env, ""),
            "password": os.environ.get(reddit.password_env, ""),
        }
        if not all(credentials.values()):
            return None
        return credentials

    def get_admin_password(self) -> Optional[str]:
        """Get the shared admin password."""
        return os.environ.get(self.config.auth.admin_password_env) or None

    def get_jwt_secret(self) -> Optional[str]:
        """Get the session signing secret."""
        return os.environ.get(self.config.auth.jwt_secret_env) or None


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
