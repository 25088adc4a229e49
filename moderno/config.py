import os
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List, Optional


class Settings(BaseSettings):
    # Database settings
    # MySQL Configuration
    MYSQL_HOST: str = os.getenv("MYSQL_HOST", "localhost")
    MYSQL_USER: str = os.getenv("MYSQL_USER", "root")
    MYSQL_PASSWORD: str = os.getenv("MYSQL_PASSWORD", "")
    MYSQL_DATABASE: str = os.getenv("MYSQL_DATABASE", "moderno")
    MYSQL_PORT: int = int(os.getenv("MYSQL_PORT", "3306"))
    DATABASE_URL: Optional[str] = Field(default=os.getenv("DATABASE_URL"), validate_default=True)

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_connection(cls, v: Optional[str], info) -> str:
        if isinstance(v, str) and v:
            return v
        values = info.data
        return f"mysql+pymysql://{values.get('MYSQL_USER')}:{values.get('MYSQL_PASSWORD')}@{values.get('MYSQL_HOST')}:{values.get('MYSQL_PORT')}/{values.get('MYSQL_DATABASE')}"

    # Session settings
    SESSION_SECRET_KEY: str = os.getenv("SESSION_SECRET_KEY", "moderno_secret_key_change_this_in_production")
    SESSION_ALGORITHM: str = os.getenv("SESSION_ALGORITHM", "HS256")
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "moderno.sid")
    SESSION_EXPIRE_DAYS: int = int(os.getenv("SESSION_EXPIRE_DAYS", "30"))
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "False") == "True"

    # Seed admin account
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

    # Client tier rules
    TIER_GOLD_THRESHOLD: int = int(os.getenv("TIER_GOLD_THRESHOLD", "50000"))
    TIER_PLATINUM_THRESHOLD: int = int(os.getenv("TIER_PLATINUM_THRESHOLD", "100000"))
    TIER_VIP_REFERRALS: int = int(os.getenv("TIER_VIP_REFERRALS", "5"))

    # Frontend origins allowed by CORS (comma separated)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # App settings
    DEBUG: bool = os.getenv("DEBUG", "True") == "True"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
