from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    data_dir: Path = Path("./data")
    invoice_number_prefix: str = "A"
    invoice_number_width: int = 5
    default_currency: str = "USD"
    default_color_template: str = "purple"
    cors_origins: list[str] = ["http://localhost:3000"]


settings = Settings()
