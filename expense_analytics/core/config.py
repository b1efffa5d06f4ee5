from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "ExpenseAnalytics"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    # Record source: "dynamo" or "memory"
    RECORD_BACKEND: str = Field(default="dynamo")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_EXPENSES_TABLE: str = Field(default="expense-analytics-expenses")
    DYNAMO_CATEGORIES_TABLE: str = Field(default="expense-analytics-categories")

    # Report defaults
    DEFAULT_TREND_DAYS: int = 30
    DEFAULT_MONTHLY_MONTHS: int = 6
    RECENT_EXPENSES_LIMIT: int = 50


settings = Settings()
