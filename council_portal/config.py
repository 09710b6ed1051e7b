from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


class Settings(BaseSettings):
    # === DATABASE ===
    DATABASE_URL: str = Field(default="sqlite:///./council_portal.db", description="SQLAlchemy database URL")

    # === JWT AUTH ===
    SECRET_KEY: str = Field(default="change-me", description="Secret key for JWT token signing")
    ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_DAYS: int = Field(default=7, description="Auth token and cookie lifetime in days")
    RESET_TOKEN_EXPIRE_MINUTES: int = Field(default=15, description="Password reset link lifetime in minutes")

    # === ENVIRONMENT ===
    ENVIRONMENT: str = Field(default="development", description="development, staging or production")
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://127.0.0.1:3000", description="Comma separated list of allowed origins")
    PUBLIC_BASE_URL: Optional[str] = Field(default=None, description="Base URL used in emailed links; request URL when unset")

    # === UPLOADS ===
    UPLOAD_DIR: str = Field(default="uploads", description="Base directory for local document copies")
    MIRROR_NOC_UPLOADS_LOCALLY: bool = Field(default=True, description="Keep a local copy of NOC attachments")
    CLOUDINARY_CLOUD_NAME: str = Field(default="", description="Cloudinary cloud name")
    CLOUDINARY_API_KEY: str = Field(default="", description="Cloudinary API key")
    CLOUDINARY_API_SECRET: str = Field(default="", description="Cloudinary API secret")
    CLOUDINARY_FOLDER: str = Field(default="tsdc", description="Root folder for remote uploads")
    UPLOAD_TIMEOUT_SECONDS: float = Field(default=30.0, description="Timeout for a single remote upload")

    # === EMAIL ===
    EMAIL_HOST: str = Field(default="", description="SMTP host")
    EMAIL_PORT: int = Field(default=587, description="SMTP port")
    EMAIL_HOST_USER: str = Field(default="", description="SMTP username")
    EMAIL_HOST_PASSWORD: str = Field(default="", description="SMTP password")
    EMAIL_FROM: str = Field(default="noreply@tsdc.example.org", description="Email sender address")
    EMAIL_FROM_NAME: str = Field(default="Telangana State Dental Council", description="Email sender display name")

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.CLOUDINARY_CLOUD_NAME and self.CLOUDINARY_API_KEY and self.CLOUDINARY_API_SECRET)


# Create settings instance
settings = Settings()
