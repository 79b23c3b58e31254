from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Configuration settings for the Agent Dashboard Service.

    Loads from a .env file and environment variables.

    All environment variables are prefixed with AGENT_DASHBOARD_SERVICE_
    to avoid conflicts with other services.
    """

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- GENERAL APP SETTINGS ---
    PROJECT_NAME: str = "Agent Dashboard Service"
    SERVICE_NAME: str = Field(
        "agent-dashboard", alias="AGENT_DASHBOARD_SERVICE_SERVICE_NAME"
    )
    DEBUG: bool = Field(False, alias="AGENT_DASHBOARD_SERVICE_DEBUG")
    ENVIRONMENT: Environment = Field(
        Environment.DEVELOPMENT, alias="AGENT_DASHBOARD_SERVICE_ENVIRONMENT"
    )
    LOGGING_LEVEL: str = Field("INFO", alias="AGENT_DASHBOARD_SERVICE_LOGGING_LEVEL")
    LOG_FORMAT: str = Field("detailed", alias="AGENT_DASHBOARD_SERVICE_LOG_FORMAT")
    ROOT_PATH: str = Field("", alias="AGENT_DASHBOARD_SERVICE_ROOT_PATH")

    # --- DATABASE SETTINGS ---
    DATABASE_URL: str = Field(..., alias="AGENT_DASHBOARD_SERVICE_DATABASE_URL")

    # --- CORS SETTINGS ---
    CORS_ALLOW_ORIGINS: List[str] = Field(
        ["*"], alias="AGENT_DASHBOARD_SERVICE_CORS_ALLOW_ORIGINS"
    )

    # --- TENANCY ---
    # Agents and prompt labels are partitioned by this id unless a token
    # carries its own tenant_id claim.
    TENANT_ID: str = Field("default", alias="AGENT_DASHBOARD_SERVICE_TENANT_ID")

    # --- REQUEST LIMITS ---
    MAX_REQUEST_BODY_SIZE: int = Field(
        50000, alias="AGENT_DASHBOARD_SERVICE_MAX_REQUEST_BODY_SIZE"
    )
    API_RATE_LIMIT: str = Field(
        "100 per 15 minutes", alias="AGENT_DASHBOARD_SERVICE_API_RATE_LIMIT"
    )
    READONLY_RATE_LIMIT: str = Field(
        "300 per 15 minutes", alias="AGENT_DASHBOARD_SERVICE_READONLY_RATE_LIMIT"
    )
    INTENSIVE_RATE_LIMIT: str = Field(
        "10 per hour", alias="AGENT_DASHBOARD_SERVICE_INTENSIVE_RATE_LIMIT"
    )

    # --- MCP SETTINGS ---
    MCP_CLIENT_ID: str = Field(
        "agent-dashboard", alias="AGENT_DASHBOARD_SERVICE_MCP_CLIENT_ID"
    )
    # Milliseconds
    MCP_REQUEST_TIMEOUT: int = Field(
        30000, alias="AGENT_DASHBOARD_SERVICE_MCP_REQUEST_TIMEOUT"
    )
    MCP_MAX_CONNECTIONS: int = Field(
        10, alias="AGENT_DASHBOARD_SERVICE_MCP_MAX_CONNECTIONS"
    )

    # --- AUTH SETTINGS ---
    AUTH_ENABLED: bool = Field(False, alias="AGENT_DASHBOARD_SERVICE_AUTH_ENABLED")
    JWT_SECRET_KEY: Optional[str] = Field(
        None, alias="AGENT_DASHBOARD_SERVICE_JWT_SECRET_KEY"
    )
    JWT_ALGORITHM: str = Field("HS256", alias="AGENT_DASHBOARD_SERVICE_JWT_ALGORITHM")
    JWT_AUDIENCE: Optional[str] = Field(
        None, alias="AGENT_DASHBOARD_SERVICE_JWT_AUDIENCE"
    )
    JWT_ISSUER: Optional[str] = Field(None, alias="AGENT_DASHBOARD_SERVICE_JWT_ISSUER")

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        return self.ENVIRONMENT == Environment.TESTING

    @field_validator("DATABASE_URL", mode="after")
    def validate_db_url(cls, v: str) -> str:
        """Ensures Postgres URLs use the psycopg driver."""
        return str(v).replace("postgresql://", "postgresql+psycopg://")


# Global instance of the settings
settings = Settings()
