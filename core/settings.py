"""
Centralized application settings using Pydantic.

All environment variables are read once at startup and validated.
Use this instead of scattered os.getenv() calls throughout the codebase.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class AWSSettings(BaseSettings):
    """Textract connection configuration.

    Credentials are resolved by boto3's default chain (environment, shared
    config, instance role) and never stored here.
    """

    AWS_REGION: str = "us-east-1"
    TEXTRACT_ENDPOINT_URL: Optional[str] = None

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class AppSettings(BaseSettings):
    """General application settings."""

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    WORK_DIR: str = ""

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}

    @property
    def work_dir(self) -> Optional[Path]:
        """Directory for uploads and converted images, system temp when unset."""
        value = self.WORK_DIR.strip()
        if not value:
            return None
        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path


# Singleton instances
aws_settings = AWSSettings()
app_settings = AppSettings()
