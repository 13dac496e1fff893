"""
Configuration management for the Hyperliquid signing service
"""
from typing import List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = "development"
    debug: bool = True

    # Server
    host: str = "127.0.0.1"
    port: int = 8081
    reload: bool = True

    # CORS
    cors_origins: Union[str, List[str]] = Field(
        default=[
            "http://localhost:5173",  # Vite dev server
            "http://localhost:3000",
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ]
    )

    # Rate limiting
    rate_limit_per_minute: int = 100

    # Hyperliquid
    hyperliquid_testnet: bool = True
    verify_signatures: bool = Field(default=True, description="Recover every signature before returning it")

    # Logging
    log_level: str = "INFO"

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


# Global settings instance
settings = Settings()
