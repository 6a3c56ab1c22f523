from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 5000
    data_dir: Path = Path("data")
    data_file_name: str = "todos.json"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def data_file(self) -> Path:
        return self.data_dir / self.data_file_name


@lru_cache
def get_settings() -> Settings:
    return Settings()
