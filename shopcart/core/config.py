from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "shopcart_db"
    
    # JWT Configuration (tokens are issued by the authentication service)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    
    # Product catalog service
    PRODUCT_SERVICE_URL: str = "http://localhost:3003/products"
    PRODUCT_LOOKUP_TIMEOUT: float = 5.0  # seconds
    
    # Optimistic concurrency on cart documents
    CART_WRITE_RETRIES: int = 5
    
    # Application Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "Shopcart"
    LOG_LEVEL: str = "INFO"
    
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
