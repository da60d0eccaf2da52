from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./matchday.db"
    SQL_ECHO: bool = False

    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    GOOGLE_CLIENT_ID: str = "YOUR_GOOGLE_CLIENT_ID_HERE"

    # Firebase Cloud Messaging (HTTP v1). Push is disabled when the file is unset.
    FIREBASE_SERVICE_ACCOUNT_FILE: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None
    PUSH_ICON_URL: str = "/logo-192.png"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
