from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a local .env file if present
load_dotenv()


class Settings(BaseSettings):
    chime_endpoint: str = Field(
        default="https://service.chime.aws.amazon.com", validation_alias="ENDPOINT"
    )
    # Chime control plane calls go to us-east-1; the media region is chosen per meeting.
    control_region: str = Field(default="us-east-1", validation_alias="AWS_CONTROL_REGION")

    app_variant: str = Field(
        default="meetingV2", validation_alias=AliasChoices("APP", "npm_config_app")
    )
    dist_dir: str = Field(default="dist", validation_alias="DIST_DIR")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=8895, validation_alias="PORT")

    log_dir: str = Field(default="logs", validation_alias="LOG_DIR")
    metrics_log_retention_days: int = Field(
        default=14, validation_alias="METRICS_LOG_RETENTION_DAYS"
    )
    metrics_label: str = Field(default="oculus", validation_alias="METRICS_LABEL")

    meeting_ttl_seconds: Optional[float] = Field(
        default=None, validation_alias="MEETING_TTL_SECONDS"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


try:
    settings = Settings()
except ValidationError as exc:
    invalid_keys = [err["loc"][0] for err in exc.errors()]
    raise RuntimeError(f"Invalid environment variables: {invalid_keys}") from exc

if settings.meeting_ttl_seconds is not None and settings.meeting_ttl_seconds <= 0:
    raise RuntimeError("MEETING_TTL_SECONDS must be positive when set.")
