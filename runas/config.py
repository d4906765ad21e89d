import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from runas.domain.shared.error import ConfigurationError

LOGGER_NAME = "runas"
CONFIG_FILE_ENV = "RUNAS_CONFIG_FILE"
LOG_FILE_ENV = "RUNAS_LOG_FILE"


def load_yaml_config(config_file: str | None) -> dict[str, Any]:
    """Read a YAML settings file. A missing or empty file gives no settings."""
    if not config_file:
        return {}
    path = Path(config_file).expanduser()
    if not path.is_file():
        return {}
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings from the YAML file named by RUNAS_CONFIG_FILE."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        super().__init__(settings_cls)
        self._data = load_yaml_config(os.environ.get(CONFIG_FILE_ENV))

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        fields = self.settings_cls.model_fields
        return {name: value for name, value in self._data.items() if name in fields}


class LoggingConfig(BaseModel):
    """Nested in Config, so RUNAS_LOGGING__<FIELD> sets each field."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Log file path, from RUNAS_LOG_FILE."""
        return os.environ.get(LOG_FILE_ENV)


class Config(BaseSettings):
    verify: bool = True  # Check each test ran as the identity it was expanded for
    log_principal: bool = True  # Log the active principal before each test
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="RUNAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows RUNAS_LOGGING__LEVEL override
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Add the YAML file below environment and .env, above secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure the ``runas`` logger.

    The root logger belongs to the test runner, so records keep propagating
    to it. RUNAS_LOG_FILE adds a file handler, replacing one added by an
    earlier call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))
        logger.addHandler(file_handler)

    logger.debug("Logging configured: level=%s, file=%s", config.level, config.file)
