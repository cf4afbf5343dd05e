"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ibam_dashboard.models.curriculum import CurriculumConfig


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path(__file__).resolve().parent.parent.parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from settings.yaml."""

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
        if 'server' in data:
            flattened['host'] = data['server'].get('host')
            flattened['port'] = data['server'].get('port')
        if 'supabase' in data:
            flattened['supabase_url'] = data['supabase'].get('url')
            flattened['supabase_anon_key'] = data['supabase'].get('anon_key')
            flattened['request_timeout_seconds'] = data['supabase'].get('timeout_seconds')
        if 'dashboard' in data:
            flattened['recent_activity_limit'] = data['dashboard'].get('recent_activity_limit')
        if 'auth' in data:
            auth = data['auth']
            flattened['auth_cookie_name'] = auth.get('auth_cookie_name')
            flattened['session_cookie_name'] = auth.get('session_cookie_name')
            flattened['auth_cookie_max_age_seconds'] = auth.get('cookie_max_age_seconds')

        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase project
    supabase_url: str = Field(description="Supabase project URL")
    supabase_anon_key: str = Field(description="Supabase anon (public) API key")
    request_timeout_seconds: float = Field(default=10.0)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Dashboard
    recent_activity_limit: int = Field(default=5)

    # Login cookies
    auth_cookie_name: str = Field(default="ibam_auth")
    session_cookie_name: str = Field(default="ibam_session")
    auth_cookie_max_age_seconds: int = Field(default=7 * 24 * 60 * 60)

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def curriculum_path(self) -> Path:
        return self.project_root / "config" / "curriculum.yaml"

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


def load_curriculum(path: Path | None = None) -> CurriculumConfig:
    """Load the ordered module catalogue from YAML."""
    curriculum_path = path or _find_project_root() / "config" / "curriculum.yaml"
    if not curriculum_path.exists():
        raise FileNotFoundError(f"Curriculum file not found: {curriculum_path}")
    with open(curriculum_path, encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    return CurriculumConfig(modules=data.get('modules', []))


@functools.lru_cache
def get_curriculum() -> CurriculumConfig:
    """Get the curriculum catalogue singleton."""
    return load_curriculum(get_settings().curriculum_path)
