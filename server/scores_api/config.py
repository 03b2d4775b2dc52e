"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database path
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
    db_name: str = "wellness.db"

    @property
    def db_path(self) -> str:
        return os.path.join(self.data_path, self.db_name)

    # Goal records returned per category for history views
    goal_history_limit: int = 10

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8083

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_prefix = "SCORES_"


@lru_cache
def get_settings() -> Settings:
    return Settings()
