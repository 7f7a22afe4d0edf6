import logging

import pydantic
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class EmailConfig(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    smtp_server: str = Field(min_length=1, validation_alias="SMTP_SERVER")
    smtp_port: int = Field(validation_alias="SMTP_PORT")
    smtp_user: str = Field(min_length=1, validation_alias="SMTP_EMAIL")
    smtp_password: str = Field(min_length=1, validation_alias="SMTP_KEY")
    smtp_from: str = Field(min_length=1, validation_alias="SMTP_FROM")
    api_key: str = Field(min_length=1, validation_alias="API_KEY")
    project_id: str | None = Field(None, validation_alias="PROJECT_ID")
    smtp_timeout: float = Field(15, gt=0, validation_alias="SMTP_TIMEOUT")

    @property
    def use_ssl(self) -> bool:
        return self.smtp_port == 465


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    function_name: str | None = Field(None, validation_alias="FUNCTION_NAME")
    sweep_interval: float = Field(60, ge=0, validation_alias="SWEEP_INTERVAL")
    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8000, validation_alias="PORT")


def load_config() -> EmailConfig:
    try:
        return EmailConfig()
    except pydantic.ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        logger.error("Invalid mail configuration: %s", fields)
        raise ConfigurationError() from None
