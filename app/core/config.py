from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    # PostgreSQL in deployment (postgresql+psycopg://...), SQLite for local runs
    DATABASE_URL: str = "sqlite:///./health_metrics.db"
    ENVIRONMENT: str = "local"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    # Lookback for the BMI trend endpoint
    TREND_WINDOW_DAYS: int = 30


settings = Settings()
