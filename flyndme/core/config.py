"""
Configuration settings for the application
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""
    
    # App settings
    APP_NAME: str = "FlyndMe API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    
    # API settings
    API_PREFIX: str = "/api"
    
    # Amadeus credentials and endpoint
    AMADEUS_API_KEY: Optional[str] = None
    AMADEUS_API_SECRET: Optional[str] = None
    AMADEUS_BASE_URL: str = "https://test.api.amadeus.com"
    AMADEUS_TIMEOUT: float = 10.0
    
    # Rate limit handling (HTTP 429)
    AMADEUS_MAX_RETRIES: int = 3
    AMADEUS_RETRY_BASE_DELAY: float = 1.0  # seconds, doubled per attempt
    
    # Search settings
    DEFAULT_CURRENCY: str = "EUR"
    MAX_ORIGINS: int = 9
    
    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
