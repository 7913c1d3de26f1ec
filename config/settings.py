"""
Configuration settings for the application
"""
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATEGORY = "web"
DEFAULT_CATEGORY_COLOR = "#7FB3D5"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Infrastructure configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./portfolio.db", alias="DATABASE_URL")
    port: int = Field(default=5000, alias="PORT")

    # Core authentication and security
    jwt_secret_key: Optional[str] = Field(default=None, alias="JWT_SECRET_KEY")
    jwt_expire_hours: int = Field(default=24, alias="JWT_EXPIRE_HOURS")

    # Default admin credential (bootstrap and operator reset)
    admin_email: str = Field(default="admin@portfolio.local", alias="ADMIN_EMAIL")
    admin_password: str = Field(default="admin123", alias="ADMIN_PASSWORD")
    # Pre-shared operator secret; the HTTP reset route is disabled while unset
    admin_reset_token: Optional[str] = Field(default=None, alias="ADMIN_RESET_TOKEN")

    # Environment configuration
    env: str = Field(default="development", validation_alias=AliasChoices("ENV", "NODE_ENV", "env"))

    # Frontend / CORS configuration
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")
    production_origins: List[str] = Field(default_factory=list, alias="PRODUCTION_ORIGINS")

    # Uploaded project images
    uploads_dir: Path = Field(default=Path("./uploads"), alias="UPLOADS_DIR")

    # Insert default categories and sample projects into empty tables
    seed_demo_data: bool = Field(default=True, alias="SEED_DEMO_DATA")

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        """Origins allowed to make cross-origin requests for the current environment"""
        if self.is_production:
            return self.production_origins
        return [self.frontend_url]


# Instantiate settings object
settings = Settings()
