"""Settings read from the environment using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .notify.smtp import SmtpNotifier

DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_DATA_PATH = Path("data") / "waitlist.json"


class SmtpSettings(BaseSettings):
    """Email delivery settings, from EMAIL_ENABLED and SMTP_*."""

    model_config = SettingsConfigDict(
        populate_by_name=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    enabled: bool = Field(default=False, validation_alias="EMAIL_ENABLED")
    host: str = Field(default="localhost", validation_alias="SMTP_HOST")
    port: int = Field(default=587, validation_alias="SMTP_PORT")
    user: str = Field(default="", validation_alias="SMTP_USER")
    password: str = Field(default="", validation_alias="SMTP_PASSWORD")
    from_email: str = Field(default="noreply@walkin.local", validation_alias="SMTP_FROM")

    def notifier(self) -> SmtpNotifier:
        return SmtpNotifier(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            from_email=self.from_email,
            enabled=self.enabled,
        )


class Settings(BaseSettings):
    """Runtime configuration for one shop location, from WALKIN_*."""

    model_config = SettingsConfigDict(
        env_prefix="WALKIN_",
        env_ignore_empty=True,
        extra="ignore",
    )

    location_id: str = ""
    timezone: str = DEFAULT_TIMEZONE
    data_path: Path = DEFAULT_DATA_PATH
    audit_log: Path | None = None
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from the environment.

        Keyword overrides that are not None win over the environment.

        Raises:
            ValueError: If no location id is configured, or a variable has an
                invalid value (pydantic's ValidationError is a ValueError).
        """
        settings = cls(**{k: v for k, v in overrides.items() if v is not None})
        if not settings.location_id:
            raise ValueError(
                "No shop location configured. Set WALKIN_LOCATION_ID or pass --location."
            )
        return settings
