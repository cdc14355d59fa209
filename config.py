"""
Configuration module for the Travel Refund Policy service.
Loads settings from environment variables (and an optional .env file).
"""

from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    # Policy Evaluation
    window_matching: Literal["lead_time", "within_window"] = Field(
        default="lead_time",
        alias="WINDOW_MATCHING",
        description="How cancellation windows are matched: 'lead_time' or 'within_window'"
    )

    # Cancellation Handling
    estimated_refund_time: str = Field(
        default="5-7 business days",
        alias="ESTIMATED_REFUND_TIME",
        description="Refund turnaround reported on issued cancellations"
    )
    cancellation_id_prefix: str = Field(
        default="CXL",
        alias="CANCELLATION_ID_PREFIX",
        description="Prefix for generated cancellation identifiers"
    )
    default_currency: str = Field(
        default="USD",
        alias="DEFAULT_CURRENCY",
        description="Currency used for sample catalog prices"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
