from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashstudy.domain.constants import DB_FILENAME, PREFS_FILENAME


def _config_files() -> list[Path]:
    # Evaluated per call so a patched HOME is honoured.
    return [
        Path.home() / ".config/flashstudy/config.toml",
        Path.home() / ".flashstudy.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for flashstudy.
    Supports loading from:
    1. Config file (~/.config/flashstudy/config.toml or ~/.flashstudy.toml)
    2. Environment variables (FLASHSTUDY_*)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHSTUDY_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/flashstudy")
    db_path: Path | None = None
    prefs_path: Path | None = None

    verbose: int = 0  # 0 warnings, 1 info, 2+ debug

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", "db_path", "prefs_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. TOML config file (if exists)
    3. Environment variables (FLASHSTUDY_*)
    4. cli_overrides (passed from Typer, None values dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.db_path is None:
        config.db_path = config.data_dir / DB_FILENAME
    if config.prefs_path is None:
        config.prefs_path = config.data_dir / PREFS_FILENAME

    return config
