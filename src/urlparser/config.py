"""Configuration management using pydantic-settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )
    
    # Suffix list source
    suffix_list_url: str = "https://publicsuffix.org/list/public_suffix_list.dat"
    suffix_list_file: Optional[str] = None
    
    # Suffix list cache
    suffix_cache_path: str = "./data/public_suffix_list.dat"
    suffix_cache_ttl_seconds: int = 86400
    
    # Timeouts (seconds)
    suffix_fetch_timeout_seconds: float = 10.0
    
    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    
    # Logging
    log_level: str = "INFO"
    
    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        Path(self.suffix_cache_path).parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
