"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from config/settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load settings from YAML file."""
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if 'storage' in data:
            flattened['data_dir'] = data['storage'].get('data_dir')
            flattened['progress_key'] = data['storage'].get('progress_key')
            flattened['settings_key'] = data['storage'].get('settings_key')
        if 'scheduler' in data:
            flattened['default_session_size'] = data['scheduler'].get('default_session_size')
        if 'logging' in data:
            flattened['log_json'] = data['logging'].get('json')
            flattened['log_level'] = data['logging'].get('level')

        # Remove None values
        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Engine settings loaded from environment and config files.

    These configure the host application, not the learner. Learner
    preferences live in :class:`vocab_drill.models.settings.LearnerSettings`.
    """

    model_config = SettingsConfigDict(
        env_prefix="VOCAB_DRILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    data_dir: Path | None = Field(default=None)
    progress_key: str = Field(default="progress")
    settings_key: str = Field(default="settings")

    # Scheduler
    default_session_size: int = Field(default=25, ge=1)

    # Logging
    log_json: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def storage_dir(self) -> Path:
        """Directory holding the learner documents."""
        if self.data_dir is not None:
            return self.data_dir
        return self.project_root / "data" / "learner"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


@functools.lru_cache
def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()
