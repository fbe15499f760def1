from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_REFERENCE_DATA = str(Path(__file__).parent / "data" / "reference_data.json")


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./quotes.db"
    COMPANY_NAME: str = "Blind Quote"
    REFERENCE_DATA_PATH: str = DEFAULT_REFERENCE_DATA
    DEFAULT_PRODUCT: str = "roller_blind"
    GST_RATE: float = 0.10

    # Raise on programmer contract violations instead of reporting them
    DEBUG: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
