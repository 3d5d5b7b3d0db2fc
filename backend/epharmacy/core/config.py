from pydantic_settings import BaseSettings
from typing import List, Optional
from datetime import timedelta


class Settings(BaseSettings):
    ENV: str = "development"
    SECRET_KEY: str = "change-me-in-production"
    DATABASE_URL: str = "sqlite:///./epharmacy.db"
    
    # CORS
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    
    # JWT
    JWT_ACCESS_EXPIRES_DAYS: int = 7
    
    LOG_LEVEL: str = "INFO"
    
    # Admin seed
    ADMIN_USERNAME: Optional[str] = "admin"
    ADMIN_PASSWORD: Optional[str] = None
    
    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]
    
    @property
    def jwt_expires_delta(self) -> timedelta:
        return timedelta(days=self.JWT_ACCESS_EXPIRES_DAYS)
    
    class Config:
        env_file = ".env"


settings = Settings()
