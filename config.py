"""
Notifier configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The WeCom robot webhook URL carries the robot key in its query string, so it
is held as a SecretStr and only unwrapped at the point of sending.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MESSAGE_TEMPLATE = '{% include "wecomrobot.default.message" %}'

# Upper bound of a WeCom robot text message, in UTF-8 bytes
DEFAULT_MAX_MESSAGE_SIZE = 2048


class HttpClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="WECOM_ROBOT_HTTP_", extra="ignore", frozen=True
    )

    timeout_seconds: float = 10.0
    follow_redirects: bool = True
    user_agent: str = "wecom-robot-notifier/0.1"

    # TLS
    verify_tls: bool = True
    ca_file: Optional[str] = None
    cert_file: Optional[str] = None
    key_file: Optional[str] = None

    proxy_url: Optional[str] = None

    # At most one of basic auth / bearer token may be set
    basic_auth_username: Optional[str] = None
    basic_auth_password: Optional[SecretStr] = None
    bearer_token: Optional[SecretStr] = None


class WeComRobotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="WECOM_ROBOT_", extra="ignore", frozen=True
    )

    webhook_url: SecretStr
    message: str = DEFAULT_MESSAGE_TEMPLATE
    max_message_size: int = Field(default=DEFAULT_MAX_MESSAGE_SIZE, gt=0)

    http: HttpClientSettings = Field(default_factory=HttpClientSettings)

    @field_validator("webhook_url")
    @classmethod
    def _require_absolute_http_url(cls, v: SecretStr) -> SecretStr:
        parsed = urlparse(v.get_secret_value())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            # Don't echo the value back: it holds the robot key
            raise ValueError("webhook_url must be an absolute http(s) URL")
        return v


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"

    # Template context shared by every notification sent from this process
    receiver: str = "wecomrobot"
    external_url: str = ""

    # Sub-configs (composed via model_validator below)
    wecom_robot: Optional[WeComRobotSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.wecom_robot is None:
            self.wecom_robot = WeComRobotSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
