from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "SmartBudget"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TABLE_PREFIX: str = Field(default="smartbudget")

    # AWS S3 (receipt images)
    S3_BUCKET_NAME: str = Field(default="smartbudget-receipts")
    S3_REGION: str = Field(default="eu-west-1")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="change-me-in-production", validation_alias="JWT_SECRET")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Outbound email (SMTP)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_STARTTLS: bool = True
    EMAIL_FROM: str = "noreply@smartbudget.app"
    APP_URL: str = "http://localhost:5000"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Bill reminders / budgets
    ADMIN_API_KEY: Optional[str] = None
    BILL_REMINDER_LOOKAHEAD_DAYS: int = 30
    DEFAULT_ALERT_THRESHOLD: int = 80

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        populate_by_name=True,
        extra="ignore",
    )


settings = Settings()
